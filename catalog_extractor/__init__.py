"""
VTEX Catalog Extractor

Modules:
    models      - Data models (Product, RelayDescriptor, ScanSession, ExtractionResult)
    common      - Shared utilities (config loader, price and text parsing, logging)
    fetching    - Relay chain fetcher for blocked catalog endpoints
    scanning    - Paginated catalog search scan and item normalization
    extraction  - Product extraction from saved page snapshots
    validation  - Listing rules applied to every extracted product
"""
