"""Initial schema: card sets, cards, review stats, study sessions

Revision ID: 001_initial_schema
Revises:
Create Date: 2025-01-06 00:00:00.000000

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '001_initial_schema'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    """
    Create all tables of the flashcard schema.
    """
    op.create_table(
        'card_set',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.String(), nullable=False),
        sa.Column('title', sa.String(), nullable=False),
        sa.Column('description', sa.String(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id', name='card_set_pkey'),
    )
    op.create_index(op.f('ix_card_set_user_id'), 'card_set', ['user_id'], unique=False)

    op.create_table(
        'card',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('card_set_id', sa.Integer(), nullable=False),
        sa.Column('front_word', sa.String(), nullable=False),
        sa.Column('front_hint', sa.String(), nullable=True),
        sa.Column('front_description', sa.String(), nullable=True),
        sa.Column('back_word', sa.String(), nullable=False),
        sa.Column('back_hint', sa.String(), nullable=True),
        sa.Column('back_description', sa.String(), nullable=True),
        sa.Column('display_order', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['card_set_id'], ['card_set.id'], name='card_card_set_id_fkey'),
        sa.PrimaryKeyConstraint('id', name='card_pkey'),
    )
    op.create_index(op.f('ix_card_card_set_id'), 'card', ['card_set_id'], unique=False)

    op.create_table(
        'user_card_stat',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.String(), nullable=False),
        sa.Column('card_id', sa.Integer(), nullable=False),
        sa.Column('score', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('total_attempts', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('correct_count', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('incorrect_count', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('last_studied_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('version', sa.Integer(), nullable=False, server_default='0'),
        sa.PrimaryKeyConstraint('id', name='user_card_stat_pkey'),
        sa.UniqueConstraint('user_id', 'card_id', name='user_card_stat_user_card_key'),
    )
    op.create_index(op.f('ix_user_card_stat_user_id'), 'user_card_stat', ['user_id'], unique=False)
    op.create_index(op.f('ix_user_card_stat_card_id'), 'user_card_stat', ['card_id'], unique=False)

    op.create_table(
        'learning_session',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.String(), nullable=False),
        sa.Column('card_set_id', sa.Integer(), nullable=True),
        sa.Column('is_reversed', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('is_random_order', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('card_order', sa.JSON(), nullable=False),
        sa.Column('total_words', sa.Integer(), nullable=False),
        sa.Column('cursor', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('correct_so_far', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('status', sa.String(), nullable=False, server_default='created'),
        sa.Column('started_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('completed_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('correct_words', sa.Integer(), nullable=True),
        sa.Column('accuracy', sa.Integer(), nullable=True),
        sa.Column('version', sa.Integer(), nullable=False, server_default='0'),
        sa.PrimaryKeyConstraint('id', name='learning_session_pkey'),
        sa.CheckConstraint(
            "status IN ('created', 'in_progress', 'completed', 'cancelled')",
            name='learning_session_status_check'
        ),
    )
    op.create_index(op.f('ix_learning_session_user_id'), 'learning_session', ['user_id'], unique=False)
    op.create_index(op.f('ix_learning_session_card_set_id'), 'learning_session', ['card_set_id'], unique=False)

    op.create_table(
        'card_progress',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.String(), nullable=False),
        sa.Column('card_id', sa.Integer(), nullable=False),
        sa.Column('session_id', sa.Integer(), nullable=True),
        sa.Column('is_correct', sa.Boolean(), nullable=False),
        sa.Column('response_time_ms', sa.Integer(), nullable=True),
        sa.Column('reviewed_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id', name='card_progress_pkey'),
    )
    op.create_index(op.f('ix_card_progress_user_id'), 'card_progress', ['user_id'], unique=False)
    op.create_index(op.f('ix_card_progress_card_id'), 'card_progress', ['card_id'], unique=False)
    op.create_index(op.f('ix_card_progress_session_id'), 'card_progress', ['session_id'], unique=False)


def downgrade() -> None:
    """
    Drop all tables of the flashcard schema.
    """
    op.drop_index(op.f('ix_card_progress_session_id'), table_name='card_progress')
    op.drop_index(op.f('ix_card_progress_card_id'), table_name='card_progress')
    op.drop_index(op.f('ix_card_progress_user_id'), table_name='card_progress')
    op.drop_table('card_progress')
    op.drop_index(op.f('ix_learning_session_card_set_id'), table_name='learning_session')
    op.drop_index(op.f('ix_learning_session_user_id'), table_name='learning_session')
    op.drop_table('learning_session')
    op.drop_index(op.f('ix_user_card_stat_card_id'), table_name='user_card_stat')
    op.drop_index(op.f('ix_user_card_stat_user_id'), table_name='user_card_stat')
    op.drop_table('user_card_stat')
    op.drop_index(op.f('ix_card_card_set_id'), table_name='card')
    op.drop_table('card')
    op.drop_index(op.f('ix_card_set_user_id'), table_name='card_set')
    op.drop_table('card_set')
