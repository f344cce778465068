import sys

from .editor import main

sys.exit(main())
