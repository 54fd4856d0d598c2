"""
Centralized constants for GraphWeaver.
All magic numbers for the batch core live here.
"""

# ===========================================
# BATCH PROCESSING
# ===========================================
BATCH_CHUNK_SIZE = 10                 # files per chunk
BATCH_DELAY_BETWEEN_CHUNKS_MS = 1000  # cooldown after each chunk
BATCH_MAX_RETRIES = 3                 # retries per file
BATCH_RETRY_DELAY_MS = 1000           # fixed delay between retry attempts
BATCH_MAX_CONCURRENT_PROCESSING = 3   # in-flight files within a chunk
BATCH_GENERATE_FRONT_MATTER = True
BATCH_GENERATE_WIKILINKS = False

# ===========================================
# STATS PERSISTENCE
# ===========================================
STATS_SAVE_DEBOUNCE_MS = 1000         # coalesce saves within this window
STATS_HISTORY_LIMIT = 100             # runs kept in the history file
STATS_FILE = 'data/graphweaver-stats.json'

# ===========================================
# GENERATION
# ===========================================
GENERATION_MAX_TOKENS = 2048
GENERATION_TEMPERATURE = 0.3
DEFAULT_PROVIDER = 'claude'
DEFAULT_MODEL = ''                    # empty: provider default

# ===========================================
# DOCUMENTS
# ===========================================
DOCUMENT_EXTENSIONS = ['.md']
FRONT_MATTER_DELIMITER = '---'

# ===========================================
# LOGGING
# ===========================================
LOG_LEVEL = 'INFO'
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
LOG_FILE = 'logs/graphweaver.log'
LOG_MAX_SIZE_MB = 10
LOG_BACKUP_COUNT = 5
