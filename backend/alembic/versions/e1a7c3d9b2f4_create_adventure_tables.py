"""create users, adventures, tracks, waypoints, pictures, shares, tags

Revision ID: e1a7c3d9b2f4
Revises:
Create Date: 2026-10-18 09:30:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = 'e1a7c3d9b2f4'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('username', sa.String(length=64), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('NOW()'), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_users_id', 'users', ['id'])
    op.create_index('ix_users_username', 'users', ['username'], unique=True)

    op.create_table(
        'adventures',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('adventure_date', sa.Date(), nullable=True),
        sa.Column('center_lat', sa.Float(), nullable=True),
        sa.Column('center_lng', sa.Float(), nullable=True),
        sa.Column('zoom', sa.Integer(), nullable=True),
        sa.Column('preview_picture_id', sa.Integer(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('NOW()'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('NOW()'), nullable=False),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_adventures_id', 'adventures', ['id'])
    op.create_index('ix_adventures_user_id', 'adventures', ['user_id'])

    op.create_table(
        'tracks',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('adventure_id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('mode', sa.String(length=20), server_default='hiking', nullable=False),
        sa.Column('color', sa.String(length=9), nullable=False),
        sa.Column('points', postgresql.JSONB(astext_type=sa.Text()), nullable=False),
        sa.Column('distance_km', sa.Float(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('NOW()'), nullable=False),
        sa.ForeignKeyConstraint(['adventure_id'], ['adventures.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_tracks_id', 'tracks', ['id'])
    op.create_index('ix_tracks_adventure_id', 'tracks', ['adventure_id'])

    op.create_table(
        'waypoints',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('adventure_id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(), nullable=True),
        sa.Column('icon', sa.String(length=16), nullable=False),
        sa.Column('latitude', sa.Float(), nullable=False),
        sa.Column('longitude', sa.Float(), nullable=False),
        sa.ForeignKeyConstraint(['adventure_id'], ['adventures.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_waypoints_id', 'waypoints', ['id'])
    op.create_index('ix_waypoints_adventure_id', 'waypoints', ['adventure_id'])

    op.create_table(
        'pictures',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('adventure_id', sa.Integer(), nullable=False),
        sa.Column('asset_id', sa.String(), nullable=True),
        sa.Column('filename', sa.String(), nullable=True),
        sa.Column('latitude', sa.Float(), nullable=True),
        sa.Column('longitude', sa.Float(), nullable=True),
        sa.Column('taken_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('thumbnail_url', sa.Text(), nullable=True),
        sa.ForeignKeyConstraint(['adventure_id'], ['adventures.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_pictures_id', 'pictures', ['id'])
    op.create_index('ix_pictures_adventure_id', 'pictures', ['adventure_id'])

    op.create_table(
        'adventure_shares',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('adventure_id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('permission', sa.String(length=10), server_default='view', nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('NOW()'), nullable=False),
        sa.ForeignKeyConstraint(['adventure_id'], ['adventures.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('adventure_id', 'user_id', name='uq_adventure_shares_adventure_user')
    )
    op.create_index('ix_adventure_shares_id', 'adventure_shares', ['id'])
    op.create_index('ix_adventure_shares_adventure_id', 'adventure_shares', ['adventure_id'])
    op.create_index('ix_adventure_shares_user_id', 'adventure_shares', ['user_id'])

    op.create_table(
        'tags',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('color', sa.String(length=9), nullable=False),
        sa.Column('category', sa.String(), server_default='Custom', nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('name')
    )
    op.create_index('ix_tags_id', 'tags', ['id'])

    op.create_table(
        'adventure_tags',
        sa.Column('adventure_id', sa.Integer(), nullable=False),
        sa.Column('tag_id', sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(['adventure_id'], ['adventures.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['tag_id'], ['tags.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('adventure_id', 'tag_id')
    )


def downgrade() -> None:
    op.drop_table('adventure_tags')
    op.drop_index('ix_tags_id', table_name='tags')
    op.drop_table('tags')
    op.drop_index('ix_adventure_shares_user_id', table_name='adventure_shares')
    op.drop_index('ix_adventure_shares_adventure_id', table_name='adventure_shares')
    op.drop_index('ix_adventure_shares_id', table_name='adventure_shares')
    op.drop_table('adventure_shares')
    op.drop_index('ix_pictures_adventure_id', table_name='pictures')
    op.drop_index('ix_pictures_id', table_name='pictures')
    op.drop_table('pictures')
    op.drop_index('ix_waypoints_adventure_id', table_name='waypoints')
    op.drop_index('ix_waypoints_id', table_name='waypoints')
    op.drop_table('waypoints')
    op.drop_index('ix_tracks_adventure_id', table_name='tracks')
    op.drop_index('ix_tracks_id', table_name='tracks')
    op.drop_table('tracks')
    op.drop_index('ix_adventures_user_id', table_name='adventures')
    op.drop_index('ix_adventures_id', table_name='adventures')
    op.drop_table('adventures')
    op.drop_index('ix_users_username', table_name='users')
    op.drop_index('ix_users_id', table_name='users')
    op.drop_table('users')
