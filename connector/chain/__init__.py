"""On-chain collaborator bindings."""

from connector.chain.web3_chain import Web3Chain, Web3PoolRegistry, Web3Router, Web3Token

__all__ = ["Web3Chain", "Web3Router", "Web3PoolRegistry", "Web3Token"]
