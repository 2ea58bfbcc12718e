"""Initial migration - create all tables

Revision ID: 001_initial
Revises:
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '001_initial'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Runners
    op.create_table(
        'runners',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('name', sa.String(200), nullable=False),
        sa.Column('alternate_names', sa.JSON(), nullable=False),
        sa.Column('email', sa.String(255), nullable=True),
        sa.Column('gender', sa.String(2), nullable=False),
        sa.Column('age', sa.Integer(), nullable=True),
        sa.Column('city', sa.String(100), nullable=True),
        sa.Column('state', sa.String(50), nullable=True),
        sa.Column('verified', sa.Boolean(), nullable=True),
        sa.Column('matching_confidence', sa.Integer(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
    )
    op.create_index('ix_runners_name', 'runners', ['name'])

    # Races
    op.create_table(
        'races',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('name', sa.String(200), nullable=False),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('distance', sa.String(20), nullable=False),
        sa.Column('distance_miles', sa.Numeric(5, 2), nullable=True),
        sa.Column('city', sa.String(100), nullable=True),
        sa.Column('state', sa.String(50), nullable=True),
        sa.Column('total_finishers', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('average_time', sa.String(10), nullable=True),
        sa.Column('results_url', sa.String(500), nullable=True),
    )

    # Results
    op.create_table(
        'results',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('runner_id', sa.Integer(), sa.ForeignKey('runners.id', ondelete='CASCADE'), nullable=False),
        sa.Column('race_id', sa.Integer(), sa.ForeignKey('races.id', ondelete='CASCADE'), nullable=False),
        sa.Column('finish_time', sa.String(10), nullable=False),
        sa.Column('overall_place', sa.Integer(), nullable=True),
        sa.Column('gender_place', sa.Integer(), nullable=True),
        sa.Column('age_group_place', sa.Integer(), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('source_provider', sa.String(50), nullable=True),
        sa.Column('source_result_id', sa.String(100), nullable=True),
        sa.Column('raw_runner_name', sa.String(200), nullable=True),
        sa.Column('raw_location', sa.String(200), nullable=True),
        sa.Column('raw_age', sa.Integer(), nullable=True),
        sa.Column('matching_score', sa.Integer(), nullable=False, server_default='100'),
        sa.Column('needs_review', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('imported_at', sa.DateTime(), nullable=True),
    )
    op.create_index('ix_results_runner_id', 'results', ['runner_id'])
    op.create_index('ix_results_race_id', 'results', ['race_id'])
    op.create_index('ix_results_needs_review', 'results', ['needs_review'])

    # Match audit log
    op.create_table(
        'runner_matches',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('candidate_runner_id', sa.Integer(), sa.ForeignKey('runners.id', ondelete='SET NULL'), nullable=True),
        sa.Column('raw_runner_data', sa.JSON(), nullable=False),
        sa.Column('match_score', sa.Integer(), nullable=False),
        sa.Column('match_reasons', sa.JSON(), nullable=False),
        sa.Column('status', sa.String(20), nullable=False),
        sa.Column('source_provider', sa.String(50), nullable=False),
        sa.Column('source_race_id', sa.String(50), nullable=False),
        sa.Column('reviewed_by', sa.String(100), nullable=True),
        sa.Column('reviewed_at', sa.DateTime(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
    )
    op.create_index('ix_runner_matches_candidate_runner_id', 'runner_matches', ['candidate_runner_id'])
    op.create_index('ix_runner_matches_status', 'runner_matches', ['status'])

    # Series
    op.create_table(
        'race_series',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('name', sa.String(200), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('year', sa.Integer(), nullable=False),
        sa.Column('start_date', sa.Date(), nullable=True),
        sa.Column('end_date', sa.Date(), nullable=True),
        sa.Column('scoring_system', sa.String(20), nullable=False, server_default='points'),
        sa.Column('minimum_races', sa.Integer(), nullable=False, server_default='2'),
        sa.Column('max_races_for_score', sa.Integer(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=True),
        sa.Column('is_private', sa.Boolean(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
    )

    op.create_table(
        'race_series_races',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('series_id', sa.Integer(), sa.ForeignKey('race_series.id', ondelete='CASCADE'), nullable=False),
        sa.Column('race_id', sa.Integer(), sa.ForeignKey('races.id'), nullable=False),
        sa.Column('series_race_number', sa.Integer(), nullable=False),
        sa.Column('points_multiplier', sa.Numeric(4, 2), nullable=False, server_default='1.00'),
        sa.UniqueConstraint('series_id', 'race_id', name='uq_series_race'),
    )
    op.create_index('ix_race_series_races_series_id', 'race_series_races', ['series_id'])

    op.create_table(
        'series_participants',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('series_id', sa.Integer(), sa.ForeignKey('race_series.id', ondelete='CASCADE'), nullable=False),
        sa.Column('runner_id', sa.Integer(), sa.ForeignKey('runners.id', ondelete='CASCADE'), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.UniqueConstraint('series_id', 'runner_id', name='uq_series_participant'),
    )
    op.create_index('ix_series_participants_series_id', 'series_participants', ['series_id'])


def downgrade() -> None:
    op.drop_table('series_participants')
    op.drop_table('race_series_races')
    op.drop_table('race_series')
    op.drop_table('runner_matches')
    op.drop_table('results')
    op.drop_table('races')
    op.drop_table('runners')
