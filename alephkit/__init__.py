"""Session pallet, storage migration, chain-spec forking, flooder options and consensus timing for Aleph-style nodes."""

__version__ = "0.1.0"