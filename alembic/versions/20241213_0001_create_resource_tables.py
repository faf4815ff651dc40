"""create resource tables

Revision ID: 20241213_0001
Revises:
Create Date: 2024-12-13 20:00:00.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '20241213_0001'
down_revision = None
branch_labels = None
depends_on = None


def _common_columns() -> list[sa.Column]:
    """Columns every entity kind carries (from BaseModel)."""
    return [
        sa.Column('id', sa.Uuid(), primary_key=True, nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('deleted', sa.DateTime(timezone=True), nullable=True, comment='Soft-delete marker, NULL while active'),
    ]


def _common_indexes(table: str) -> None:
    op.create_index(f'ix_{table}_created_at', table, ['created_at'])
    op.create_index(f'ix_{table}_deleted', table, ['deleted'])


def upgrade() -> None:
    """Create one table per entity kind, parents first."""

    op.create_table(
        'field',
        *_common_columns(),
        sa.Column('continent', sa.String(length=100), nullable=False),
        sa.Column('country', sa.String(length=100), nullable=False),
        sa.Column('state', sa.String(length=100), nullable=False),
        sa.Column('abbreviation', sa.String(length=20), nullable=False),
        sa.Column('designation', sa.String(length=255), nullable=False),
    )
    _common_indexes('field')
    op.create_index('ix_field_abbreviation', 'field', ['abbreviation'], unique=True)

    op.create_table(
        'church',
        *_common_columns(),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('description', sa.String(), nullable=False),
        sa.Column('image', sa.String(length=255), nullable=True),
        sa.Column('field_id', sa.Uuid(), sa.ForeignKey('field.id'), nullable=True),
    )
    _common_indexes('church')
    op.create_index('ix_church_field_id', 'church', ['field_id'])

    op.create_table(
        'volunteer',
        *_common_columns(),
        sa.Column('first_name', sa.String(length=100), nullable=False),
        sa.Column('last_name', sa.String(length=100), nullable=True),
        sa.Column('email', sa.String(length=255), nullable=True, unique=True),
        sa.Column('phone', sa.String(length=30), nullable=True),
        sa.Column('joined_date', sa.Date(), nullable=True),
        sa.Column('field_id', sa.Uuid(), sa.ForeignKey('field.id'), nullable=True),
    )
    _common_indexes('volunteer')
    op.create_index('ix_volunteer_field_id', 'volunteer', ['field_id'])

    op.create_table(
        'announcement',
        *_common_columns(),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('message', sa.String(), nullable=False),
        sa.Column('date', sa.Date(), nullable=True),
        sa.Column('fixed', sa.Boolean(), nullable=False, server_default=sa.false()),
    )
    _common_indexes('announcement')

    op.create_table(
        'agenda',
        *_common_columns(),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('message', sa.String(), nullable=False),
        sa.Column('date', sa.Date(), nullable=False),
    )
    _common_indexes('agenda')

    op.create_table(
        'testimonial',
        *_common_columns(),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=True),
        sa.Column('text', sa.String(), nullable=False),
    )
    _common_indexes('testimonial')

    op.create_table(
        'file',
        *_common_columns(),
        sa.Column('name', sa.String(length=255), nullable=False, unique=True),
        sa.Column('original_name', sa.String(length=255), nullable=False),
        sa.Column('mimetype', sa.String(length=100), nullable=False),
        sa.Column('size', sa.Integer(), nullable=False),
    )
    _common_indexes('file')

    op.create_table(
        'log',
        *_common_columns(),
        sa.Column('ip', sa.String(length=64), nullable=True),
        sa.Column('method', sa.String(length=10), nullable=False),
        sa.Column('url', sa.String(length=2048), nullable=False),
        sa.Column('body', sa.JSON(), nullable=True),
        sa.Column('query', sa.String(length=2048), nullable=True),
        sa.Column('status_code', sa.String(length=3), nullable=False),
        sa.Column('files', sa.JSON(), nullable=True),
    )
    _common_indexes('log')


def downgrade() -> None:
    """Drop every resource table, children first."""
    for table in ('log', 'file', 'testimonial', 'agenda', 'announcement', 'volunteer', 'church', 'field'):
        op.drop_table(table)
