from pathlib import Path
import sys

# Run from a checkout without installing: put src/ on sys.path.
BASE_DIR = Path(__file__).resolve().parent
SRC_DIR = BASE_DIR / "src"
if SRC_DIR.exists():
    src_str = str(SRC_DIR)
    if src_str not in sys.path:
        sys.path.insert(0, src_str)

from llmprice.app.main import main


if __name__ == "__main__":
    raise SystemExit(main())
