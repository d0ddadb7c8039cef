#!/usr/bin/env python3
"""
Blob store factory to switch between the filesystem and Firestore based on configuration.
"""

import logging

from .config import LeaderboardConfig


def get_blob_store(config: LeaderboardConfig):
    """
    Return the appropriate blob store for the configuration.

    Priority:
    1. If use_firestore is set (USE_FIRESTORE=true or running on GAE), use Firestore
    2. Otherwise, use files below output_root (default)
    """
    logger = logging.getLogger(__name__)

    if config.use_firestore:
        from .firestore_store import FirestoreBlobStore
        logger.info(f"Using Firestore blob store (collection {config.firestore_collection})")
        return FirestoreBlobStore(config.firestore_collection)

    from .store import LocalBlobStore
    logger.info(f"Using local blob store at {config.output_root}")
    return LocalBlobStore(config.output_root)
