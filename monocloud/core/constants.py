"""Core constants: cache key prefixes and shared literal values.

Single source of truth for cache key structure. Used by the cache key
builders and the capability prober.
"""

# Cache key prefixes for the cache clients (joined with CACHE_KEY_SEP)
CACHE_PREFIX_REPOSITORY = "repo"
CACHE_PREFIX_ANALYSIS = "ai-analysis"
CACHE_PREFIX_REPO_DESCRIPTION = "ai-repo-description"
CACHE_PREFIX_SPEECH = "speech"

# Delimiter for composite keys
CACHE_KEY_SEP = ":"

# Sentinel keys used only by the capability prober (appended to the namespace)
CACHE_PROBE_PREFIX = "__probe__"
CACHE_PROBE_READ_KEY = f"{CACHE_PROBE_PREFIX}{CACHE_KEY_SEP}read"
CACHE_PROBE_WRITE_KEY = f"{CACHE_PROBE_PREFIX}{CACHE_KEY_SEP}write"
CACHE_PROBE_WRITE_TTL = 10

# Batch size for bulk UNLINK/DEL during clear
CACHE_CLEAR_CHUNK_SIZE = 500

# Number of dependencies folded into a text-analysis key
ANALYSIS_KEY_DEPENDENCY_LIMIT = 5

# Speech synthesis defaults
SPEECH_DEFAULT_VOICE = "alloy"
SPEECH_DEFAULT_INSTRUCTIONS = "Speak naturally and professionally"
SPEECH_CONTENT_TYPE = "audio/mpeg"
