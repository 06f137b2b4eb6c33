#!/usr/bin/env python3
"""
Seed categories and products from a CSV file via the Storefront API

This script:
1. Reads a product CSV (name, description, price, quantity, category, shipping, image_url)
2. Logs in as an admin
3. Creates any missing categories
4. Downloads product images (optional)
5. Creates products via the API

Usage:
    python seed_data.py \
        --csv datasets/products.csv \
        --api-url http://localhost:8000 \
        --email admin@example.com \
        --password secret
"""

import csv
import argparse
import requests
from slugify import slugify
import time
import logging
from typing import Dict, List, Optional, Any, Tuple
from datetime import datetime
from concurrent.futures import ThreadPoolExecutor, as_completed

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(levelname)s - %(message)s',
    datefmt='%Y-%m-%d %H:%M:%S'
)
logger = logging.getLogger(__name__)

MAX_PHOTO_BYTES = 1_000_000
TRUE_VALUES = {'1', 'true', 'yes', 'y'}


def parse_price(price_str: str) -> Optional[float]:
    """Parse '$1,299.99' style prices; None when unparseable or not positive"""
    cleaned = price_str.replace('$', '').replace(',', '').strip()
    # Ranges like "12.99 - 15.99" keep the lower bound
    if '-' in cleaned:
        cleaned = cleaned.split('-')[0].strip()
    try:
        price = round(float(cleaned), 2)
    except ValueError:
        return None
    return price if price > 0 else None


def map_row(row: Dict[str, str], default_quantity: int) -> Optional[Dict[str, Any]]:
    """Map a CSV row to product form fields; None when required data is missing"""
    name = row.get('name', '').strip()
    description = row.get('description', '').strip() or name
    category = row.get('category', '').strip()
    price = parse_price(row.get('price', ''))

    if not name or not category or price is None:
        return None

    quantity_str = row.get('quantity', '').strip()
    quantity = int(quantity_str) if quantity_str.isdigit() else default_quantity

    return {
        'name': name[:500],
        'description': description,
        'price': price,
        'quantity': quantity,
        'category': category,
        'shipping': row.get('shipping', '').strip().lower() in TRUE_VALUES,
        'image_url': row.get('image_url', '').strip(),
    }


class StorefrontAPIClient:
    """Client for the Storefront API"""

    def __init__(self, base_url: str):
        self.base_url = base_url.rstrip('/')
        self.session = requests.Session()
        self.category_cache: Dict[str, str] = {}

    def _url(self, path: str) -> str:
        return f'{self.base_url}/api/v1{path}'

    def login(self, email: str, password: str) -> None:
        response = self.session.post(
            self._url('/auth/login'),
            json={'email': email, 'password': password},
            timeout=10
        )
        response.raise_for_status()
        body = response.json()
        if body.get('user', {}).get('role') != 1:
            raise RuntimeError(f'{email} is not an admin account')
        self.session.headers['Authorization'] = f"Bearer {body['token']}"
        logger.info(f"✓ Logged in as {email}")

    def get_categories(self) -> Dict[str, str]:
        """Get all categories and return mapping: lowercase name -> UUID"""
        if self.category_cache:
            return self.category_cache

        response = self.session.get(self._url('/category/get-category'), timeout=10)
        response.raise_for_status()
        for cat in response.json().get('category', []):
            self.category_cache[cat['name'].lower()] = cat['id']
            self.category_cache[cat['slug'].lower()] = cat['id']

        logger.info(f"✓ Loaded {len(response.json().get('category', []))} categories")
        return self.category_cache

    def _lookup(self, name: str) -> Optional[str]:
        mapping = self.get_categories()
        return mapping.get(name.lower()) or mapping.get(slugify(name))

    def ensure_category(self, name: str) -> str:
        category_id = self._lookup(name)
        if category_id:
            return category_id

        response = self.session.post(
            self._url('/category/create-category'),
            json={'name': name},
            timeout=10
        )
        if response.status_code == 409:
            # Created meanwhile (or under different casing); refresh and retry lookup
            self.category_cache.clear()
            category_id = self._lookup(name)
            if category_id:
                return category_id
        response.raise_for_status()
        mapping = self.get_categories()
        category = response.json()['category']
        mapping[category['name'].lower()] = category['id']
        mapping[category['slug'].lower()] = category['id']
        logger.info(f"✓ Created category {category['name']}")
        return category['id']

    def download_image(self, image_url: str) -> Optional[Tuple[bytes, str]]:
        """Fetch an image; None when unreachable, not an image or too large"""
        if not image_url or not image_url.startswith(('http://', 'https://')):
            return None
        try:
            response = requests.get(image_url, timeout=30)
            response.raise_for_status()
        except requests.exceptions.RequestException as e:
            logger.warning(f"  ⚠ Could not download {image_url}: {e}")
            return None

        content_type = response.headers.get('content-type', '').split(';')[0]
        if not content_type.startswith('image/'):
            logger.warning(f"  ⚠ {image_url} is not an image ({content_type})")
            return None
        if len(response.content) > MAX_PHOTO_BYTES:
            logger.warning(f"  ⚠ {image_url} is larger than 1MB, skipping photo")
            return None
        return response.content, content_type

    def create_product(self, product: Dict[str, Any], category_id: str, photo: Optional[Tuple[bytes, str]]) -> Optional[str]:
        data = {
            'name': product['name'],
            'description': product['description'],
            'price': str(product['price']),
            'quantity': str(product['quantity']),
            'category': category_id,
            'shipping': 'true' if product['shipping'] else 'false',
        }
        files = None
        if photo:
            content, content_type = photo
            files = {'photo': ('photo', content, content_type)}

        try:
            response = self.session.post(
                self._url('/product/create-product'),
                data=data,
                files=files,
                timeout=30
            )
            response.raise_for_status()
        except requests.exceptions.HTTPError as e:
            message = e.response.text if e.response is not None else str(e)
            logger.error(f"✗ Failed to create '{product['name']}': {message}")
            return None
        except requests.exceptions.RequestException as e:
            logger.error(f"✗ Failed to create '{product['name']}': {e}")
            return None
        return response.json()['products']['id']


def load_csv(file_path: str) -> List[Dict[str, str]]:
    """Load CSV file and return list of rows"""
    logger.info(f"Reading CSV file: {file_path}")
    with open(file_path, 'r', encoding='utf-8', errors='ignore') as f:
        reader = csv.DictReader(f)
        rows = [
            {(k or '').strip().lower(): (v.strip() if v else '') for k, v in row.items()}
            for row in reader
        ]
    logger.info(f"✓ Loaded {len(rows):,} rows from CSV")
    return rows


def seed_product(client: StorefrontAPIClient, product: Dict[str, Any], skip_images: bool) -> Optional[str]:
    category_id = client.ensure_category(product['category'])
    photo = None if skip_images else client.download_image(product['image_url'])
    return client.create_product(product, category_id, photo)


def main():
    parser = argparse.ArgumentParser(
        description='Seed categories and products from a CSV file via the Storefront API',
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument('--csv', required=True, help='Path to product CSV file')
    parser.add_argument('--api-url', default='http://localhost:8000', help='Storefront API URL')
    parser.add_argument('--email', required=True, help='Admin email')
    parser.add_argument('--password', required=True, help='Admin password')
    parser.add_argument('--count', type=int, default=100, help='Maximum number of products to create')
    parser.add_argument('--quantity', type=int, default=10, help='Stock quantity when the CSV has none')
    parser.add_argument('--skip-images', action='store_true', help='Skip photo downloads')
    parser.add_argument('--workers', type=int, default=4, help='Parallel product creations')

    args = parser.parse_args()

    start_time = time.time()
    logger.info("=" * 70)
    logger.info("STOREFRONT PRODUCT SEEDING SCRIPT")
    logger.info(f"Started at: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")
    logger.info("=" * 70)

    rows = load_csv(args.csv)
    products = [p for p in (map_row(row, args.quantity) for row in rows) if p][:args.count]
    logger.info(f"✓ {len(products)} valid products (skipped {len(rows) - len(products)} rows or over --count)")
    if not products:
        return

    client = StorefrontAPIClient(args.api_url)
    client.login(args.email, args.password)

    # Categories first, serially, so parallel workers never race to create one
    for name in sorted({p['category'] for p in products}):
        client.ensure_category(name)

    created = 0
    with ThreadPoolExecutor(max_workers=args.workers) as executor:
        futures = {
            executor.submit(seed_product, client, product, args.skip_images): product
            for product in products
        }
        for future in as_completed(futures):
            product = futures[future]
            try:
                product_id = future.result()
            except Exception as e:
                logger.error(f"✗ Error seeding '{product['name']}': {e}")
                continue
            if product_id:
                created += 1
                logger.info(f"✓ [{created}/{len(products)}] {product['name']} ({product_id})")

    elapsed = time.time() - start_time
    logger.info("=" * 70)
    logger.info(f"Created {created}/{len(products)} products in {elapsed:.1f}s")
    logger.info("=" * 70)


if __name__ == '__main__':
    main()
