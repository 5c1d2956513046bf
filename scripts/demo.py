"""Run the sample grid and query stream through the engine and print the ranking."""
import argparse
import logging
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from wordfinder.engine import SearchEngine
from wordfinder.settings import effective_log_level, settings

GRID = "abcdc,fgwio,chill,pqnsd,uvdxy,chill,chill".split(",")
WORDS = "cold,wind,snow,chill,wind".split(",")

parser = argparse.ArgumentParser(description=__doc__)
parser.add_argument("--mode", default=settings.DEFAULT_EXECUTION_MODE, help="sequential or pooled")
parser.add_argument("--workers", type=int, default=settings.DEFAULT_WORKERS, help="pool size (1-10)")
args = parser.parse_args()

logging.basicConfig(level=effective_log_level(settings), format="%(asctime)s %(name)s %(levelname)s %(message)s")

engine = SearchEngine(GRID)
for word, count in engine.find_with_counts(WORDS, args.mode, args.workers):
    print(f"{word}\t{count}")
