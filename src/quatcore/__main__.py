import sys

from quatcore.main import main

sys.exit(main())
