import sys

from texcorrect.main import main

sys.exit(main())
