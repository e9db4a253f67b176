"""
Read-side aggregators over the rating/review store.

- Statistics Aggregator: totals, mean rating, 1-5 distribution
- Activity Merger: recent ratings and reviews as one time-ordered feed
- Batch Retriever: per-game user data for lists of game ids
"""
