# Common utilities
# config_loader is imported by module path: it depends on models, which depend on these.
from .log_config import setup_logging
from .price_utils import (
    fill_missing_prices,
    find_currency_amounts,
    join_split_amounts,
    parse_installment_total,
    parse_price,
    to_decimal,
)
from .text_utils import absolute_url, canonical_link, category_path_from_url, clean_text
