import sys

from s3_verify.cli import main

sys.exit(main())
