"""create series, books, characters, world elements, notes and violations

Revision ID: 4b7e1c9a2f30
Revises:
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '4b7e1c9a2f30'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list:
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
    ]


def _series_fk() -> sa.Column:
    return sa.Column('series_id', sa.String(), sa.ForeignKey('series.id', ondelete='CASCADE'), nullable=False)


def upgrade() -> None:
    op.create_table(
        'series',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('author_id', sa.String(), nullable=False),
        sa.Column('title', sa.String(), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('premise', sa.Text(), nullable=True),
        sa.Column('genre', sa.String(), nullable=False),
        sa.Column('subgenres', sa.JSON(), nullable=False),
        sa.Column('target_book_count', sa.Integer(), nullable=False),
        sa.Column('current_book_count', sa.Integer(), nullable=False),
        sa.Column('series_status', sa.String(), nullable=False),
        sa.Column('primary_themes', sa.JSON(), nullable=False),
        sa.Column('secondary_themes', sa.JSON(), nullable=False),
        sa.Column('recurring_motifs', sa.JSON(), nullable=False),
        sa.Column('main_conflict', sa.Text(), nullable=True),
        sa.Column('series_arc_summary', sa.Text(), nullable=True),
        sa.Column('planned_ending', sa.Text(), nullable=True),
        sa.Column('tone', sa.String(), nullable=False),
        sa.Column('pacing', sa.String(), nullable=False),
        sa.Column('target_audience', sa.String(), nullable=False),
        sa.Column('content_rating', sa.String(), nullable=False),
        sa.Column('metadata', sa.JSON(), nullable=False),
        *_timestamps(),
    )
    op.create_index('ix_series_id', 'series', ['id'])
    op.create_index('ix_series_author_id', 'series', ['author_id'])

    op.create_table(
        'books',
        sa.Column('id', sa.String(), primary_key=True),
        _series_fk(),
        sa.Column('author_id', sa.String(), nullable=False),
        sa.Column('book_number', sa.Integer(), nullable=False),
        sa.Column('title', sa.String(), nullable=False),
        sa.Column('subtitle', sa.String(), nullable=True),
        sa.Column('book_premise', sa.Text(), nullable=True),
        sa.Column('book_conflict', sa.Text(), nullable=True),
        sa.Column('book_arc_summary', sa.Text(), nullable=True),
        sa.Column('status', sa.String(), nullable=False),
        sa.Column('target_word_count', sa.Integer(), nullable=True),
        sa.Column('current_word_count', sa.Integer(), nullable=False),
        sa.Column('current_chapter_count', sa.Integer(), nullable=False),
        sa.Column('timeline_start', sa.Float(), nullable=True),
        sa.Column('timeline_end', sa.Float(), nullable=True),
        sa.Column('time_skip_from_previous', sa.Float(), nullable=True),
        *_timestamps(),
        sa.UniqueConstraint('series_id', 'book_number', name='uix_book_series_number'),
    )
    op.create_index('ix_books_series_id', 'books', ['series_id'])

    op.create_table(
        'characters',
        sa.Column('id', sa.String(), primary_key=True),
        _series_fk(),
        sa.Column('author_id', sa.String(), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('aliases', sa.JSON(), nullable=False),
        sa.Column('title', sa.String(), nullable=True),
        sa.Column('character_role', sa.String(), nullable=False),
        sa.Column('current_status', sa.String(), nullable=False),
        sa.Column('status_changed_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('status_change_reason', sa.Text(), nullable=True),
        sa.Column('first_appears_book', sa.Integer(), nullable=False),
        sa.Column('core_personality', sa.JSON(), nullable=False),
        sa.Column('backstory', sa.Text(), nullable=True),
        sa.Column('motivation', sa.Text(), nullable=True),
        sa.Column('fatal_flaw', sa.Text(), nullable=True),
        sa.Column('physical_description', sa.JSON(), nullable=False),
        sa.Column('age_at_series_start', sa.Integer(), nullable=True),
        sa.Column('dialogue_style', sa.Text(), nullable=True),
        sa.Column('arc_status', sa.String(), nullable=True),
        sa.Column('canon_lock_level', sa.String(), nullable=False),
        sa.Column('locked_attributes', sa.JSON(), nullable=False),
        *_timestamps(),
    )
    op.create_index('ix_characters_series_id', 'characters', ['series_id'])

    op.create_table(
        'world_elements',
        sa.Column('id', sa.String(), primary_key=True),
        _series_fk(),
        sa.Column('author_id', sa.String(), nullable=False),
        sa.Column('element_type', sa.String(), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('aliases', sa.JSON(), nullable=False),
        sa.Column('short_description', sa.Text(), nullable=True),
        sa.Column('full_description', sa.Text(), nullable=True),
        sa.Column('category', sa.String(), nullable=True),
        sa.Column('tags', sa.JSON(), nullable=False),
        sa.Column('rules', sa.JSON(), nullable=False),
        sa.Column('introduced_in_book', sa.Integer(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('destroyed_in_book', sa.Integer(), nullable=True),
        sa.Column('arc_status', sa.String(), nullable=True),
        sa.Column('canon_lock_level', sa.String(), nullable=False),
        sa.Column('locked_attributes', sa.JSON(), nullable=False),
        *_timestamps(),
    )
    op.create_index('ix_world_elements_series_id', 'world_elements', ['series_id'])

    op.create_table(
        'continuity_notes',
        sa.Column('id', sa.String(), primary_key=True),
        _series_fk(),
        sa.Column('author_id', sa.String(), nullable=False),
        sa.Column('note_type', sa.String(), nullable=False),
        sa.Column('title', sa.String(), nullable=False),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('subject_type', sa.String(), nullable=True),
        sa.Column('subject_id', sa.String(), nullable=True),
        sa.Column('referenced_book', sa.Integer(), nullable=True),
        sa.Column('priority', sa.String(), nullable=False),
        sa.Column('is_resolved', sa.Boolean(), nullable=False),
        sa.Column('resolution', sa.Text(), nullable=True),
        *_timestamps(),
    )
    op.create_index('ix_continuity_notes_series_id', 'continuity_notes', ['series_id'])

    op.create_table(
        'violations',
        sa.Column('id', sa.String(), primary_key=True),
        _series_fk(),
        sa.Column('subject_type', sa.String(), nullable=False),
        sa.Column('subject_id', sa.String(), nullable=True),
        sa.Column('attribute', sa.String(), nullable=True),
        sa.Column('category', sa.String(), nullable=False),
        sa.Column('severity', sa.String(), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('book_number', sa.Integer(), nullable=True),
        sa.Column('status', sa.String(), nullable=False),
        sa.Column('resolution_note', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('resolved_at', sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index('ix_violations_series_status', 'violations', ['series_id', 'status'])


def downgrade() -> None:
    op.drop_index('ix_violations_series_status', table_name='violations')
    op.drop_table('violations')
    op.drop_index('ix_continuity_notes_series_id', table_name='continuity_notes')
    op.drop_table('continuity_notes')
    op.drop_index('ix_world_elements_series_id', table_name='world_elements')
    op.drop_table('world_elements')
    op.drop_index('ix_characters_series_id', table_name='characters')
    op.drop_table('characters')
    op.drop_index('ix_books_series_id', table_name='books')
    op.drop_table('books')
    op.drop_index('ix_series_author_id', table_name='series')
    op.drop_index('ix_series_id', table_name='series')
    op.drop_table('series')
