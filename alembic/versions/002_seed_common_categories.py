"""seed_common_categories

Revision ID: 002
Revises: 001
Create Date: 2024-01-15 12:00:00.000000

"""
from alembic import op
import sqlalchemy as sa
import uuid

# revision identifiers, used by Alembic.
revision = '002'
down_revision = '001'
branch_labels = None
depends_on = None

CATEGORIES = [
    ('Electronics', 'electronics'),
    ('Book', 'book'),
    ('Clothing', 'clothing'),
    ('Home & Garden', 'home-garden'),
    ('Toys & Games', 'toys-games'),
]


def upgrade() -> None:
    categories = sa.table(
        'categories',
        sa.column('id', sa.Uuid()),
        sa.column('name', sa.Text()),
        sa.column('slug', sa.Text()),
    )
    op.bulk_insert(
        categories,
        [{'id': uuid.uuid4(), 'name': name, 'slug': slug} for name, slug in CATEGORIES]
    )


def downgrade() -> None:
    # Only the seeded rows; categories with products are left alone
    connection = op.get_bind()
    for _, slug in CATEGORIES:
        connection.execute(
            sa.text("""
                DELETE FROM categories
                WHERE slug = :slug
                  AND NOT EXISTS (SELECT 1 FROM products WHERE products.category_id = categories.id)
            """),
            {'slug': slug}
        )
