"""
Asset Deploy
Deploys the Asset and AssetMarketplace contracts with web3
"""

__version__ = "0.1.0"
