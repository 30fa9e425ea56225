import sys

from machine_translations.cli import main

sys.exit(main())
