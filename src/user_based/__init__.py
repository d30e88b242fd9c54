"""User-based collaborative filtering over a dense rating matrix.

Core idea:
- Cosine similarity between the target user's rating row and every other row
- For each item the target has not rated, predict a similarity-weighted
  average of the ratings other users gave it
- Rank the predictions and keep the top N
"""
