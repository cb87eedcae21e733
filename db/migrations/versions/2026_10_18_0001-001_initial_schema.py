"""Initial schema - create umrah_packages and bookings tables.

Revision ID: 001
Revises:
Create Date: 2026-10-18

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create initial database tables."""
    op.create_table(
        'umrah_packages',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('name', sa.String(length=200), nullable=False),
        sa.Column('price', sa.Integer(), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('duration', sa.String(length=100), nullable=True),
        sa.Column('includes', sa.JSON(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.CheckConstraint('price IS NULL OR price >= 0', name=op.f('ck_umrah_packages_price_non_negative')),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_umrah_packages'))
    )
    op.create_index(op.f('ix_umrah_packages_name'), 'umrah_packages', ['name'], unique=False)
    op.create_index(op.f('ix_umrah_packages_created_at'), 'umrah_packages', ['created_at'], unique=False)

    op.create_table(
        'bookings',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('booking_id', sa.String(length=30), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False, server_default='pending_review'),
        sa.Column('submission_date', sa.DateTime(timezone=True), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('register_date', sa.Date(), nullable=False),
        sa.Column('gender', sa.String(length=10), nullable=False),
        sa.Column('place_of_birth', sa.String(length=50), nullable=False),
        sa.Column('birth_date', sa.Date(), nullable=False),
        sa.Column('father_name', sa.String(length=100), nullable=False),
        sa.Column('mother_name', sa.String(length=100), nullable=False),
        sa.Column('marital_status', sa.String(length=10), nullable=False),
        sa.Column('address', sa.String(length=300), nullable=False),
        sa.Column('city', sa.String(length=50), nullable=False),
        sa.Column('province', sa.String(length=50), nullable=False),
        sa.Column('postal_code', sa.String(length=6), nullable=False),
        sa.Column('occupation', sa.String(length=100), nullable=False),
        sa.Column('specific_disease', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('illness', sa.Text(), nullable=True),
        sa.Column('special_needs', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('wheelchair', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('nik_number', sa.String(length=16), nullable=False),
        sa.Column('passport_number', sa.String(length=15), nullable=False),
        sa.Column('date_of_issue', sa.Date(), nullable=False),
        sa.Column('expiry_date', sa.Date(), nullable=False),
        sa.Column('place_of_issue', sa.String(length=50), nullable=False),
        sa.Column('phone_number', sa.String(length=20), nullable=False),
        sa.Column('whatsapp_number', sa.String(length=20), nullable=True),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('has_performed_umrah', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('has_performed_hajj', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('emergency_contact_name', sa.String(length=100), nullable=False),
        sa.Column('relationship', sa.String(length=20), nullable=False),
        sa.Column('emergency_contact_phone', sa.String(length=20), nullable=False),
        sa.Column('umrah_package_id', sa.Integer(), nullable=False),
        sa.Column('payment_method', sa.String(length=20), nullable=False),
        sa.Column('terms_of_service', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.ForeignKeyConstraint(
            ['umrah_package_id'], ['umrah_packages.id'],
            name=op.f('fk_bookings_umrah_package_id_umrah_packages')
        ),
        sa.CheckConstraint(
            "status IN ('pending_review', 'processing', 'approved', 'rejected', 'completed')",
            name=op.f('ck_bookings_status_valid')
        ),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_bookings')),
        sa.UniqueConstraint('email', name=op.f('uq_bookings_email')),
        sa.UniqueConstraint('nik_number', name=op.f('uq_bookings_nik_number')),
        sa.UniqueConstraint('passport_number', name=op.f('uq_bookings_passport_number')),
    )

    op.create_index(op.f('ix_bookings_booking_id'), 'bookings', ['booking_id'], unique=True)
    op.create_index(op.f('ix_bookings_status'), 'bookings', ['status'], unique=False)
    op.create_index(op.f('ix_bookings_name'), 'bookings', ['name'], unique=False)
    op.create_index(op.f('ix_bookings_phone_number'), 'bookings', ['phone_number'], unique=False)
    op.create_index(op.f('ix_bookings_umrah_package_id'), 'bookings', ['umrah_package_id'], unique=False)
    op.create_index(op.f('ix_bookings_created_at'), 'bookings', ['created_at'], unique=False)
    op.create_index('ix_bookings_status_submission', 'bookings', ['status', 'submission_date'], unique=False)


def downgrade() -> None:
    """Drop all tables."""
    op.drop_index('ix_bookings_status_submission', table_name='bookings')
    op.drop_index(op.f('ix_bookings_created_at'), table_name='bookings')
    op.drop_index(op.f('ix_bookings_umrah_package_id'), table_name='bookings')
    op.drop_index(op.f('ix_bookings_phone_number'), table_name='bookings')
    op.drop_index(op.f('ix_bookings_name'), table_name='bookings')
    op.drop_index(op.f('ix_bookings_status'), table_name='bookings')
    op.drop_index(op.f('ix_bookings_booking_id'), table_name='bookings')
    op.drop_table('bookings')

    op.drop_index(op.f('ix_umrah_packages_created_at'), table_name='umrah_packages')
    op.drop_index(op.f('ix_umrah_packages_name'), table_name='umrah_packages')
    op.drop_table('umrah_packages')
