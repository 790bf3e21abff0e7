import sys

from cracker.crack import main

sys.exit(main())
