import sys
from minio_node.main import main

if __name__ == "__main__":
    sys.exit(main())
