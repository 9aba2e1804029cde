"""
Order finalization: checkout, order history and status tracking.
"""
