"""
Site configuration for the FEEC 100 Cims catalog.

The SiteConfig defines:
- Bootstrap and catalog endpoint URLs
- Form constants the catalog endpoint expects
- CSS selectors for catalog items, paging controls and detail pages
"""

from dataclasses import replace

from .base import SiteConfig
from .settings import Settings


# ============================================================
# SITE CONFIGURATIONS
# ============================================================

SITES = {
    'feec': SiteConfig(
        name='FEEC Repte dels 100 Cims',
        short_name='FEEC',
        bootstrap_url='https://www.feec.cat/activitats/100-cims/',
        api_url='https://www.feec.cat/wp-admin/admin-ajax.php',
        api_action='load_100cims',
        catalog_query='cims_actius',         # Active summits only
        nonce_marker='var ajaxcustom',
        essential_text='Cim essencial',
        selectors={
            'item': '.item-100cims',
            'image': 'img',
            'name': 'h3',
            'facts': 'h5',                   # First: height, last: region
            'essential': 'strong',
            'paging': 'a',                   # Last one holds the page count
            'detail_container': '.row.no-gutters.fw-light.lh-1-2',
        },
    ),
}


# ============================================================
# HELPER FUNCTIONS
# ============================================================

def get_site_config(site_key: str) -> SiteConfig:
    """
    Get configuration for a site by its key.

    Args:
        site_key: Site identifier (e.g., 'feec')

    Returns:
        SiteConfig for the site

    Raises:
        ValueError: If site_key is not found
    """
    if site_key not in SITES:
        valid_keys = ', '.join(sorted(SITES.keys()))
        raise ValueError(f"Unknown site: '{site_key}'. Valid sites: {valid_keys}")
    return SITES[site_key]


def resolve_site_config(settings: Settings, site_key: str = 'feec') -> SiteConfig:
    """Get a site configuration with the endpoint overrides from settings applied."""
    config = get_site_config(site_key)
    overrides = {}
    if settings.api_url:
        overrides['api_url'] = settings.api_url
    if settings.bootstrap_url:
        overrides['bootstrap_url'] = settings.bootstrap_url
    return replace(config, **overrides) if overrides else config
