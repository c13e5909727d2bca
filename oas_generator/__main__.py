import sys

from oas_generator.cli import main

sys.exit(main())
