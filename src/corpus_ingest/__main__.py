import sys

from corpus_ingest.cli import main

sys.exit(main())
