"""
================================================================================
FILE: ingestkit/config/constants.py
================================================================================

PURPOSE:
    Package-wide constants. Immutable values shared by the pipeline,
    providers and CLI.

CONSTANT CATEGORIES:
    1. Cache
       - DEFAULT_CACHE_COLLECTION: namespace prefix for fingerprint keys
    2. Persistence file names (inside a persist directory)
    3. Pipeline defaults
    4. Reader file extensions
"""

# ================================================================================
# CACHE
# ================================================================================

DEFAULT_CACHE_COLLECTION = "ingestion_cache"
CACHE_KEY_SEPARATOR = ":"

# ================================================================================
# PERSISTENCE
# ================================================================================

DEFAULT_PERSIST_DIR = "./storage"
CACHE_PERSIST_FILENAME = "ingestion_cache.json"
DOCSTORE_PERSIST_FILENAME = "docstore.json"
VECTOR_STORE_PERSIST_FILENAME = "vector_store.json"
IMAGE_VECTOR_STORE_PERSIST_FILENAME = "image_vector_store.json"

# ================================================================================
# PIPELINE DEFAULTS
# ================================================================================

DEFAULT_NUM_WORKERS = 1
DEFAULT_CHUNK_SIZE = 1024
DEFAULT_CHUNK_OVERLAP = 200
DEFAULT_EMBED_BATCH_SIZE = 32
DEFAULT_EMBED_DIMENSION = 384

# ================================================================================
# READERS
# ================================================================================

TEXT_FILE_EXTENSIONS = frozenset({".txt", ".md", ".rst", ".csv", ".json", ".html"})
IMAGE_FILE_EXTENSIONS = frozenset({".png", ".jpg", ".jpeg", ".gif", ".webp"})
