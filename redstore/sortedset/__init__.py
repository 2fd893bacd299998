"""Skiplist-backed sorted set with score and lexicographic range borders."""