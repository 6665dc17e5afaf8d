"""initial_gymtrials_schema

Revision ID: a1c4e9d2b7f3
Revises:
Create Date: 2024-06-01 09:00:00.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = 'a1c4e9d2b7f3'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        'gyms',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('email', sa.String(100), nullable=True),
        sa.Column('phone', sa.String(20), nullable=True),
        sa.Column('address', sa.String(255), nullable=True),
        sa.Column('timezone', sa.String(50), nullable=False, server_default='UTC'),
        sa.Column('trial_retry_spacing_days', sa.Integer(), nullable=True),
        sa.Column('is_active', sa.Boolean(), server_default=sa.true()),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
    )
    op.create_index(op.f('ix_gyms_id'), 'gyms', ['id'], unique=False)

    op.create_table(
        'user',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('email', sa.String(), nullable=False),
        sa.Column('first_name', sa.String(), nullable=True),
        sa.Column('last_name', sa.String(), nullable=True),
        sa.Column('phone_number', sa.String(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('total_trials', sa.Integer(), nullable=False, server_default='3'),
        sa.Column('used_trials', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('remaining_trials', sa.Integer(), nullable=False, server_default='3'),
        sa.Column('trial_last_reset_date', sa.DateTime(), nullable=True),
        sa.CheckConstraint('used_trials >= 0 AND remaining_trials >= 0', name='ck_user_trials_non_negative'),
    )
    op.create_index(op.f('ix_user_id'), 'user', ['id'], unique=False)
    op.create_index(op.f('ix_user_email'), 'user', ['email'], unique=True)

    op.create_table(
        'trial_bookings',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('gym_id', sa.Integer(), sa.ForeignKey('gyms.id'), nullable=False),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('user.id', ondelete='SET NULL'), nullable=True),
        sa.Column('name', sa.String(150), nullable=False),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('phone', sa.String(30), nullable=False),
        sa.Column('session_type', sa.String(30), nullable=False),
        sa.Column('preferred_date', sa.Date(), nullable=False),
        sa.Column('preferred_time', sa.String(20), nullable=False),
        sa.Column('status', sa.String(20), nullable=False, server_default='pending'),
        sa.Column('emergency_contact', sa.String(255), nullable=True),
        sa.Column('health_conditions', sa.Text(), nullable=True),
        sa.Column('fitness_goals', sa.Text(), nullable=True),
        sa.Column('previous_experience', sa.Text(), nullable=True),
        sa.Column('admin_notes', sa.Text(), nullable=True),
        sa.Column('cancelled_at', sa.DateTime(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
    )
    op.create_index(op.f('ix_trial_bookings_id'), 'trial_bookings', ['id'], unique=False)
    op.create_index(op.f('ix_trial_bookings_gym_id'), 'trial_bookings', ['gym_id'], unique=False)
    op.create_index(op.f('ix_trial_bookings_user_id'), 'trial_bookings', ['user_id'], unique=False)
    op.create_index(op.f('ix_trial_bookings_email'), 'trial_bookings', ['email'], unique=False)
    op.create_index(op.f('ix_trial_bookings_session_type'), 'trial_bookings', ['session_type'], unique=False)
    op.create_index(op.f('ix_trial_bookings_status'), 'trial_bookings', ['status'], unique=False)

    op.create_table(
        'trial_history',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('user.id', ondelete='CASCADE'), nullable=False),
        sa.Column('booking_id', sa.Integer(), nullable=False, unique=True),
        sa.Column('gym_id', sa.Integer(), nullable=False),
        sa.Column('gym_name', sa.String(255), nullable=True),
        sa.Column('booking_date', sa.DateTime(), nullable=False),
        sa.Column('trial_date', sa.Date(), nullable=False),
        sa.Column('status', sa.String(20), nullable=False, server_default='scheduled'),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
    )
    op.create_index(op.f('ix_trial_history_id'), 'trial_history', ['id'], unique=False)
    op.create_index('ix_trial_history_user_gym', 'trial_history', ['user_id', 'gym_id'], unique=False)

    op.create_table(
        'members',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('gym_id', sa.Integer(), sa.ForeignKey('gyms.id'), nullable=False),
        sa.Column('name', sa.String(150), nullable=False),
        sa.Column('email', sa.String(255), nullable=True),
        sa.Column('phone', sa.String(30), nullable=True),
        sa.Column('plan_name', sa.String(100), nullable=True),
        sa.Column('join_date', sa.Date(), nullable=True),
        sa.Column('membership_valid_until', sa.Date(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
    )
    op.create_index(op.f('ix_members_id'), 'members', ['id'], unique=False)
    op.create_index(op.f('ix_members_gym_id'), 'members', ['gym_id'], unique=False)
    op.create_index(op.f('ix_members_email'), 'members', ['email'], unique=False)
    op.create_index(op.f('ix_members_phone'), 'members', ['phone'], unique=False)

    op.create_table(
        'trainers',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('gym_id', sa.Integer(), sa.ForeignKey('gyms.id'), nullable=False),
        sa.Column('first_name', sa.String(100), nullable=False),
        sa.Column('last_name', sa.String(100), nullable=True),
        sa.Column('email', sa.String(255), nullable=True),
        sa.Column('phone', sa.String(30), nullable=True),
        sa.Column('specialty', sa.String(100), nullable=True),
        sa.Column('join_date', sa.Date(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
    )
    op.create_index(op.f('ix_trainers_id'), 'trainers', ['id'], unique=False)
    op.create_index(op.f('ix_trainers_gym_id'), 'trainers', ['gym_id'], unique=False)

    op.create_table(
        'attendance_records',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('gym_id', sa.Integer(), sa.ForeignKey('gyms.id'), nullable=False),
        sa.Column('person_type', sa.String(10), nullable=False),
        sa.Column('person_id', sa.Integer(), nullable=False),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('status', sa.String(10), nullable=False),
        sa.Column('check_in_time', sa.Time(), nullable=True),
        sa.Column('check_out_time', sa.Time(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.UniqueConstraint('gym_id', 'person_type', 'person_id', 'date', name='uq_attendance_person_day'),
    )
    op.create_index(op.f('ix_attendance_records_id'), 'attendance_records', ['id'], unique=False)
    op.create_index('ix_attendance_gym_date', 'attendance_records', ['gym_id', 'date'], unique=False)

    op.create_table(
        'notifications',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('gym_id', sa.Integer(), sa.ForeignKey('gyms.id'), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=True),
        sa.Column('type', sa.String(50), nullable=False),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('message', sa.Text(), nullable=False),
        sa.Column('related_id', sa.Integer(), nullable=True),
        sa.Column('priority', sa.String(10), nullable=False, server_default='medium'),
        sa.Column('is_read', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('created_at', sa.DateTime(), nullable=False),
    )
    op.create_index(op.f('ix_notifications_id'), 'notifications', ['id'], unique=False)
    op.create_index(op.f('ix_notifications_user_id'), 'notifications', ['user_id'], unique=False)
    op.create_index('ix_notifications_gym_read', 'notifications', ['gym_id', 'is_read'], unique=False)

    op.create_table(
        'cash_validations',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('validation_code', sa.String(12), nullable=False),
        sa.Column('gym_id', sa.Integer(), sa.ForeignKey('gyms.id'), nullable=False),
        sa.Column('member_name', sa.String(150), nullable=False),
        sa.Column('email', sa.String(255), nullable=True),
        sa.Column('phone', sa.String(30), nullable=True),
        sa.Column('plan_name', sa.String(100), nullable=False),
        sa.Column('duration_months', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('amount', sa.Numeric(10, 2), nullable=False),
        sa.Column('status', sa.String(10), nullable=False, server_default='pending'),
        sa.Column('member_id', sa.Integer(), sa.ForeignKey('members.id'), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('expires_at', sa.DateTime(), nullable=False),
        sa.Column('resolved_at', sa.DateTime(), nullable=True),
    )
    op.create_index(op.f('ix_cash_validations_id'), 'cash_validations', ['id'], unique=False)
    op.create_index(op.f('ix_cash_validations_validation_code'), 'cash_validations', ['validation_code'], unique=True)
    op.create_index(op.f('ix_cash_validations_gym_id'), 'cash_validations', ['gym_id'], unique=False)
    op.create_index(op.f('ix_cash_validations_status'), 'cash_validations', ['status'], unique=False)
    op.create_index(op.f('ix_cash_validations_expires_at'), 'cash_validations', ['expires_at'], unique=False)


def downgrade():
    op.drop_table('cash_validations')
    op.drop_table('notifications')
    op.drop_table('attendance_records')
    op.drop_table('trainers')
    op.drop_table('members')
    op.drop_table('trial_history')
    op.drop_table('trial_bookings')
    op.drop_table('user')
    op.drop_table('gyms')
