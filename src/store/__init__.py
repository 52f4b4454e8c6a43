"""Path navigation layer.

This package resolves slash-delimited paths into lazy locations over
nested buckets and implements listing, tree, and disk-usage walks.
"""
