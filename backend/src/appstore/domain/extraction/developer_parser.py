from bs4 import BeautifulSoup

from .card_fields import extract_developer_apps, extract_social_links
from .count_fields import extract_developer_app_count
from .dom import canonical_url, document_title, first_attr, first_text, meta_content, select_text
from .strategy_chain import first_match
from .url_normalizer import APP_STORE_HOST
from ..value_objects.developer_detail import DeveloperDetail


def extract_developer_name(doc: BeautifulSoup) -> str:
    return first_match([
        lambda d: first_text(d, 'h1'),
        lambda d: document_title(d).split('|')[0].strip(),
        lambda d: meta_content(d, 'meta[property="og:title"]').split('|')[0].strip(),
    ], doc, default="")


def extract_developer_description(doc: BeautifulSoup) -> str:
    return first_match([
        lambda d: meta_content(d, 'meta[name="description"]'),
        lambda d: meta_content(d, 'meta[property="og:description"]'),
        lambda d: select_text(d, '.description, .developer-description, [data-test-id="developer-description"]'),
    ], doc, default="")


def extract_developer_website(doc: BeautifulSoup) -> str:
    return first_match([
        lambda d: first_attr(d, 'a[href*="partners"], a[href*="partner"]', 'href'),
        lambda d: first_attr(d, '.developer-link a', 'href'),
        lambda d: first_attr(d, 'a[href*="http"]', 'href'),
        canonical_url,
        lambda d: meta_content(d, 'meta[property="og:url"]'),
        lambda d: first_attr(d, '.developer-website, [data-test-id="developer-website"]', 'href'),
    ], doc, default="")


def extract_developer_location(doc: BeautifulSoup) -> str:
    return first_match([
        lambda d: first_text(d, '.location, .developer-location, [data-test-id="developer-location"]'),
        lambda d: meta_content(d, 'meta[property="business:contact_data:street_address"]'),
    ], doc, default="")


def parse_developer(doc: BeautifulSoup, store_host: str = APP_STORE_HOST) -> DeveloperDetail:
    website = extract_developer_website(doc)
    return DeveloperDetail(
        name=extract_developer_name(doc),
        description=extract_developer_description(doc),
        website=website,
        location=extract_developer_location(doc),
        url=website,
        app_count=extract_developer_app_count(doc),
        apps=extract_developer_apps(doc, store_host),
        social_links=extract_social_links(doc)
    )
