#!/usr/bin/env python3
"""
Asset and AssetMarketplace Deployment Script
"""

import os
import sys

# Allow running from a checkout without installing the package
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from asset_deploy.sequencer import run

if __name__ == "__main__":
    run()
