"""
scriptproxy runner
Checks the environment, then starts the proxy server
"""
import sys

from scriptproxy.cli import main

if __name__ == "__main__":
    sys.exit(main(["serve", *sys.argv[1:]]))
