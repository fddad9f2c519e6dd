# config/settings.py
import os

# NLP Toolkit Configuration
# The engine targets Chinese prose; any spaCy pipeline name can be supplied via the environment
SPACY_MODEL = os.getenv("NARRATIVE_SPACY_MODEL", "zh_core_web_sm")
SPACY_FALLBACK_LANGUAGE = os.getenv("NARRATIVE_SPACY_LANGUAGE", "zh")  # Blank pipeline used when the model is missing
SENTENCE_PUNCTUATION = ["。", "！", "？", "!", "?", "…"]  # Sentencizer boundaries when the model has no parser

# Dialogue Extraction Configuration
DIALOGUE_CONTEXT_WINDOW = 50  # Characters kept before and after each quoted span
SPEAKER_NAME_MAX_LENGTH = 10  # Longest cleaned subject phrase still accepted as a name
DIALOGUE_ASSIGNMENT_MIN_CONFIDENCE = 0.0  # Dialogues below this stay unassigned

# Character Assignment Configuration
SPEAKER_FUZZY_MATCH_ENABLED = os.getenv("NARRATIVE_FUZZY_MATCH", "false").lower() == "true"
SPEAKER_FUZZY_MATCH_THRESHOLD = 85  # fuzz.ratio score (0-100) required for a fuzzy roster hit

# Consistency Checking Configuration
NAME_SIMILARITY_THRESHOLD = 0.6  # Jaccard similarity above which two names are variants

# Pacing Configuration
PACE_SEGMENT_COUNT = 5
PACE_MIN_SEGMENT_SIZE = 100
PACE_BASE_SCORE = 5.0

# Plot Service Configuration
PLOT_MIN_CHAPTER_LENGTH = 100  # Shorter chapters get an empty analysis
PLOT_MIN_PROJECT_LENGTH = 500  # Shorter merged projects get an empty analysis
PLOT_MIN_TREND_CHAPTER_LENGTH = 50  # Chapters at or below this are skipped in project/trend analysis

# Parallel Processing Configuration
MAX_PARALLEL_WORKERS = int(os.getenv("NARRATIVE_MAX_WORKERS", "4"))  # Chapters analyzed concurrently

# Logging Configuration
LOG_DIR = "logs"
LOG_LEVEL = os.getenv("NARRATIVE_LOG_LEVEL", "INFO")
CONSOLE_LOG_LEVEL = "INFO"  # Level for console output
FILE_LOG_LEVEL = "DEBUG"    # Level for file output (more detailed)
LOG_TO_FILE = os.getenv("NARRATIVE_LOG_TO_FILE", "false").lower() == "true"
LOG_FILE_NAME = "narrative_engine.log"
