# config.py
import os

# ======= Engine selection =======
# "backtrack" (default) or "cp_sat"
ENGINE  = os.getenv("MS_ENGINE", "backtrack").strip().lower()
WORKERS = int(os.getenv("MS_WORKERS", "1"))

# ======= CP-SAT knobs =======
CP_MAX_SECONDS = float(os.getenv("MS_CP_MAX_SECONDS", "120"))
CP_MAX_MEMORY_MB = int(os.getenv("MS_CP_MAX_MEMORY_MB", "2048"))

# ======= Progress reporting =======
# Publish node counts to the progress state every N visited nodes.
PROGRESS_EVERY = int(os.getenv("MS_PROGRESS_EVERY", "50000"))

# ======= Output formatting =======
FIELD_WIDTH           = int(os.getenv("MS_FIELD_WIDTH", "11"))
MAX_DISPLAY_SOLUTIONS = int(os.getenv("MS_MAX_DISPLAY_SOLUTIONS", "50"))

# ======= Output names =======
SOLUTIONS_OUT = os.getenv("MS_SOLUTIONS_OUT", "solutions.txt")

class CFG:
    ENGINE  = ENGINE
    WORKERS = WORKERS

    CP_MAX_SECONDS   = CP_MAX_SECONDS
    CP_MAX_MEMORY_MB = CP_MAX_MEMORY_MB

    PROGRESS_EVERY = PROGRESS_EVERY

    FIELD_WIDTH           = FIELD_WIDTH
    MAX_DISPLAY_SOLUTIONS = MAX_DISPLAY_SOLUTIONS

    SOLUTIONS_OUT = SOLUTIONS_OUT

__all__ = ["CFG"]
