"""
Utility modules for StackDigest.

Cross-cutting concerns:
- Storage: MongoDB connection handling
"""
