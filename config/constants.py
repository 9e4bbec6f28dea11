"""
Centralized constants for MD Translator.
All magic numbers extracted from codebase.
"""

# ===========================================
# CHUNKING
# ===========================================
DEFAULT_MAX_CHUNK_BYTES = 20 * 1024   # 20KB per request
CHUNK_JOIN_SEPARATOR = "\n\n"         # used to reassemble translated chunks

# ===========================================
# CONCURRENCY
# ===========================================
DEFAULT_MAX_CONCURRENT_CHUNKS = 10    # in-flight translation calls per document
DEFAULT_MAX_CONCURRENT_FILES = 3      # documents translated at once in a batch

# ===========================================
# PLACEHOLDERS
# ===========================================
ANCHOR_PREFIX = "⟪CODE_"
ANCHOR_SUFFIX = "⟫"

# ===========================================
# FILES
# ===========================================
DEFAULT_EXTENSION = ".md"
MAX_KB_SIZE = 28                      # files above this are "large"
TRANSLATED_SIGNATURE = "ia-translate: true"
INVALID_STRUCTURE_SUFFIX = "_structure_invalid"
INVALID_LINK_SUFFIX = "_link_invalid"

# ===========================================
# TRANSLATION SERVICE
# ===========================================
TRANSLATION_TEMPERATURE = 0.3
TRANSLATION_TIMEOUT_SECONDS = 120.0
TRANSLATION_MAX_RETRIES = 3
TRANSLATION_RETRY_DELAY = 2           # base seconds for exponential backoff
RATE_LIMIT_MAX_DELAY = 30             # cap for 429 backoff

# ===========================================
# LINT
# ===========================================
LINT_MAX_LINE_LENGTH = 5000

# ===========================================
# LOGGING
# ===========================================
LOG_LEVEL = 'INFO'
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
LOG_FILE = 'logs/md_translator.log'
LOG_MAX_SIZE_MB = 10
LOG_BACKUP_COUNT = 5
