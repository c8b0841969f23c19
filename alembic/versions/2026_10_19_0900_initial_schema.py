"""initial_schema

Revision ID: 3f9c2a71d4b8
Revises:
Create Date: 2026-10-19 09:00:00.000000+00:00

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = '3f9c2a71d4b8'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


# =============================================================================
# HELPERS
# =============================================================================

def json_type():
    """JSONB on PostgreSQL, JSON elsewhere."""
    return sa.JSON().with_variant(postgresql.JSONB(astext_type=sa.Text()), 'postgresql')


def enum_type(name: str, *values: str) -> sa.Enum:
    """Enum stored as VARCHAR(30) plus a CHECK constraint."""
    return sa.Enum(*values, name=name, native_enum=False, length=30, create_constraint=True)


def id_column() -> sa.Column:
    return sa.Column('id', sa.String(length=36), primary_key=True)


def timestamp_columns() -> list:
    return [
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
    ]


GENDER = ('male', 'female', 'other')
SESSION_TYPE = ('online', 'offline', 'hybrid')
PAYMENT_METHOD = ('cash', 'upi', 'bank-transfer', 'card', 'cheque', 'other')


def upgrade() -> None:
    """Upgrade schema."""

    # ==========================================================================
    # 1. SCHEDULE AND CATALOG
    # ==========================================================================

    op.create_table(
        'session_slots',
        id_column(),
        sa.Column('start_time', sa.String(length=5), nullable=False),
        sa.Column('end_time', sa.String(length=5), nullable=False),
        sa.Column('display_name', sa.String(length=100), nullable=False),
        sa.Column('capacity', sa.Integer(), nullable=False),
        sa.Column('exception_capacity', sa.Integer(), nullable=False),
        sa.Column('session_type', enum_type('session_type_enum', *SESSION_TYPE), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        *timestamp_columns(),
        comment='Recurring session slots',
    )
    op.create_index('ix_session_slots_is_active', 'session_slots', ['is_active'])

    op.create_table(
        'membership_plans',
        id_column(),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('type', enum_type(
            'plan_type_enum', 'trial', 'monthly', 'quarterly', 'semi-annual', 'yearly', 'drop-in', 'class-pack'
        ), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('price', sa.Numeric(10, 2), nullable=False),
        sa.Column('duration_months', sa.Integer(), nullable=False),
        sa.Column('classes_included', sa.Integer(), nullable=True),
        sa.Column('allowed_session_types', json_type(), nullable=False),
        sa.Column('features', json_type(), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        *timestamp_columns(),
        comment='Purchasable membership plans',
    )
    op.create_index('ix_membership_plans_is_active', 'membership_plans', ['is_active'])

    # ==========================================================================
    # 2. PEOPLE
    # ==========================================================================

    op.create_table(
        'leads',
        id_column(),
        sa.Column('first_name', sa.String(length=100), nullable=False),
        sa.Column('last_name', sa.String(length=100), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('phone', sa.String(length=30), nullable=False),
        sa.Column('whatsapp_number', sa.String(length=30), nullable=True),
        sa.Column('date_of_birth', sa.Date(), nullable=True),
        sa.Column('age', sa.Integer(), nullable=True),
        sa.Column('gender', enum_type('gender_enum', *GENDER), nullable=True),
        sa.Column('address', json_type(), nullable=True),
        sa.Column('emergency_contact_name', sa.String(length=200), nullable=True),
        sa.Column('emergency_contact_phone', sa.String(length=30), nullable=True),
        sa.Column('medical_conditions', json_type(), nullable=False),
        sa.Column('health_notes', sa.Text(), nullable=True),
        sa.Column('consent_records', json_type(), nullable=False),
        sa.Column('status', enum_type(
            'lead_status_enum', 'new', 'contacted', 'trial-scheduled', 'trial-completed', 'follow-up',
            'interested', 'negotiating', 'converted', 'not-interested', 'lost'
        ), nullable=False),
        sa.Column('source', enum_type(
            'lead_source_enum', 'website', 'referral', 'walk-in', 'social-media', 'advertisement',
            'whatsapp', 'phone-inquiry', 'online', 'other'
        ), nullable=False),
        sa.Column('preferred_slot_id', sa.String(length=36),
                  sa.ForeignKey('session_slots.id', ondelete='SET NULL'), nullable=True),
        sa.Column('preferred_session_type', enum_type('session_type_enum', *SESSION_TYPE), nullable=True),
        sa.Column('interested_plan_ids', json_type(), nullable=False),
        sa.Column('trial_date', sa.Date(), nullable=True),
        sa.Column('trial_slot_id', sa.String(length=36),
                  sa.ForeignKey('session_slots.id', ondelete='SET NULL'), nullable=True),
        sa.Column('trial_status', enum_type(
            'lead_trial_status_enum', 'pending', 'scheduled', 'attended', 'no-show', 'cancelled'
        ), nullable=True),
        sa.Column('trial_feedback', sa.Text(), nullable=True),
        sa.Column('converted_to_member_id', sa.String(length=36), nullable=True),
        sa.Column('conversion_date', sa.Date(), nullable=True),
        sa.Column('last_contact_date', sa.Date(), nullable=True),
        sa.Column('next_follow_up_date', sa.Date(), nullable=True),
        sa.Column('follow_up_notes', sa.Text(), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        *timestamp_columns(),
        comment='Prospects (CRM funnel)',
    )
    op.create_index('ix_leads_email', 'leads', ['email'])
    op.create_index('ix_leads_status', 'leads', ['status'])
    op.create_index('ix_leads_next_follow_up_date', 'leads', ['next_follow_up_date'])

    op.create_table(
        'members',
        id_column(),
        sa.Column('first_name', sa.String(length=100), nullable=False),
        sa.Column('last_name', sa.String(length=100), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('phone', sa.String(length=30), nullable=False),
        sa.Column('whatsapp_number', sa.String(length=30), nullable=True),
        sa.Column('date_of_birth', sa.Date(), nullable=True),
        sa.Column('age', sa.Integer(), nullable=True),
        sa.Column('gender', enum_type('gender_enum', *GENDER), nullable=True),
        sa.Column('address', json_type(), nullable=True),
        sa.Column('emergency_contact', json_type(), nullable=True),
        sa.Column('medical_conditions', json_type(), nullable=False),
        sa.Column('health_notes', sa.Text(), nullable=True),
        sa.Column('consent_records', json_type(), nullable=False),
        sa.Column('status', enum_type(
            'member_status_enum', 'active', 'inactive', 'trial', 'expired', 'pending'
        ), nullable=False),
        sa.Column('source', enum_type(
            'member_source_enum', 'walk-in', 'referral', 'online', 'lead-conversion'
        ), nullable=False),
        sa.Column('referred_by', sa.String(length=200), nullable=True),
        sa.Column('converted_from_lead_id', sa.String(length=36),
                  sa.ForeignKey('leads.id', ondelete='SET NULL'), nullable=True),
        sa.Column('assigned_slot_id', sa.String(length=36),
                  sa.ForeignKey('session_slots.id', ondelete='SET NULL'), nullable=True),
        sa.Column('classes_attended', sa.Integer(), nullable=False),
        sa.Column('notes', sa.Text(), nullable=True),
        *timestamp_columns(),
        comment='Studio members',
    )
    op.create_index('ix_members_email', 'members', ['email'], unique=True)
    op.create_index('ix_members_status', 'members', ['status'])
    op.create_index('ix_members_assigned_slot_id', 'members', ['assigned_slot_id'])

    # ==========================================================================
    # 3. BILLING AND MEMBERSHIPS
    # ==========================================================================

    op.create_table(
        'invoices',
        id_column(),
        sa.Column('invoice_number', sa.String(length=30), nullable=False),
        sa.Column('invoice_type', enum_type('invoice_type_enum', 'membership', 'product-sale'), nullable=False),
        sa.Column('member_id', sa.String(length=36),
                  sa.ForeignKey('members.id', ondelete='RESTRICT'), nullable=False),
        sa.Column('amount', sa.Numeric(10, 2), nullable=False),
        sa.Column('tax', sa.Numeric(10, 2), nullable=False),
        sa.Column('discount', sa.Numeric(10, 2), nullable=False),
        sa.Column('discount_reason', sa.String(length=255), nullable=True),
        sa.Column('total_amount', sa.Numeric(10, 2), nullable=False),
        sa.Column('amount_paid', sa.Numeric(10, 2), nullable=False),
        sa.Column('invoice_date', sa.Date(), nullable=False),
        sa.Column('due_date', sa.Date(), nullable=False),
        sa.Column('paid_date', sa.Date(), nullable=True),
        sa.Column('status', enum_type(
            'invoice_status_enum', 'draft', 'sent', 'paid', 'partially-paid', 'overdue', 'cancelled'
        ), nullable=False),
        sa.Column('items', json_type(), nullable=False),
        sa.Column('subscription_id', sa.String(length=36), nullable=True),
        sa.Column('payment_method', enum_type('payment_method_enum', *PAYMENT_METHOD), nullable=True),
        sa.Column('payment_reference', sa.String(length=100), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        *timestamp_columns(),
        comment='Invoices',
    )
    op.create_index('ix_invoices_invoice_number', 'invoices', ['invoice_number'], unique=True)
    op.create_index('ix_invoices_member_id', 'invoices', ['member_id'])
    op.create_index('ix_invoices_invoice_date', 'invoices', ['invoice_date'])
    op.create_index('ix_invoices_due_date', 'invoices', ['due_date'])
    op.create_index('ix_invoices_status', 'invoices', ['status'])
    op.create_index('ix_invoices_subscription_id', 'invoices', ['subscription_id'])

    op.create_table(
        'membership_subscriptions',
        id_column(),
        sa.Column('member_id', sa.String(length=36),
                  sa.ForeignKey('members.id', ondelete='CASCADE'), nullable=False),
        sa.Column('plan_id', sa.String(length=36),
                  sa.ForeignKey('membership_plans.id', ondelete='RESTRICT'), nullable=False),
        sa.Column('slot_id', sa.String(length=36),
                  sa.ForeignKey('session_slots.id', ondelete='RESTRICT'), nullable=False),
        sa.Column('start_date', sa.Date(), nullable=False),
        sa.Column('end_date', sa.Date(), nullable=False),
        sa.Column('original_amount', sa.Numeric(10, 2), nullable=False),
        sa.Column('discount_amount', sa.Numeric(10, 2), nullable=False),
        sa.Column('discount_reason', sa.String(length=255), nullable=True),
        sa.Column('payable_amount', sa.Numeric(10, 2), nullable=False),
        sa.Column('status', enum_type(
            'subscription_status_enum', 'active', 'scheduled', 'expired', 'cancelled', 'pending', 'suspended'
        ), nullable=False),
        sa.Column('payment_status', enum_type(
            'subscription_payment_status_enum', 'pending', 'partial', 'paid'
        ), nullable=False),
        sa.Column('is_extension', sa.Boolean(), nullable=False),
        sa.Column('previous_subscription_id', sa.String(length=36), nullable=True),
        sa.Column('extension_days', sa.Integer(), nullable=False),
        sa.Column('extra_days', sa.Integer(), nullable=False),
        sa.Column('extra_days_reason', sa.String(length=255), nullable=True),
        sa.Column('invoice_id', sa.String(length=36),
                  sa.ForeignKey('invoices.id', ondelete='SET NULL'), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        *timestamp_columns(),
        comment='Plan purchases by members',
    )
    op.create_index('ix_membership_subscriptions_member_id', 'membership_subscriptions', ['member_id'])
    op.create_index('ix_membership_subscriptions_slot_id', 'membership_subscriptions', ['slot_id'])
    op.create_index('ix_membership_subscriptions_start_date', 'membership_subscriptions', ['start_date'])
    op.create_index('ix_membership_subscriptions_end_date', 'membership_subscriptions', ['end_date'])
    op.create_index('ix_membership_subscriptions_status', 'membership_subscriptions', ['status'])

    op.create_table(
        'payments',
        id_column(),
        sa.Column('invoice_id', sa.String(length=36),
                  sa.ForeignKey('invoices.id', ondelete='CASCADE'), nullable=False),
        sa.Column('member_id', sa.String(length=36),
                  sa.ForeignKey('members.id', ondelete='RESTRICT'), nullable=False),
        sa.Column('amount', sa.Numeric(10, 2), nullable=False),
        sa.Column('payment_method', enum_type('payment_method_enum', *PAYMENT_METHOD), nullable=False),
        sa.Column('payment_date', sa.Date(), nullable=False),
        sa.Column('transaction_reference', sa.String(length=100), nullable=True),
        sa.Column('status', enum_type(
            'payment_status_enum', 'pending', 'completed', 'failed', 'refunded', 'cancelled'
        ), nullable=False),
        sa.Column('receipt_number', sa.String(length=30), nullable=True, unique=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('recorded_by', sa.String(length=100), nullable=True),
        *timestamp_columns(),
        comment='Payments applied to invoices',
    )
    op.create_index('ix_payments_invoice_id', 'payments', ['invoice_id'])
    op.create_index('ix_payments_member_id', 'payments', ['member_id'])
    op.create_index('ix_payments_payment_date', 'payments', ['payment_date'])

    # ==========================================================================
    # 4. SLOT ASSIGNMENTS AND TRIALS
    # ==========================================================================

    op.create_table(
        'slot_subscriptions',
        id_column(),
        sa.Column('member_id', sa.String(length=36),
                  sa.ForeignKey('members.id', ondelete='CASCADE'), nullable=False),
        sa.Column('slot_id', sa.String(length=36),
                  sa.ForeignKey('session_slots.id', ondelete='CASCADE'), nullable=False),
        sa.Column('start_date', sa.Date(), nullable=False),
        sa.Column('end_date', sa.Date(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('is_exception', sa.Boolean(), nullable=False),
        *timestamp_columns(),
        comment='Standing slot assignment of members',
    )
    op.create_index('ix_slot_subscriptions_member_id', 'slot_subscriptions', ['member_id'])
    op.create_index('ix_slot_subscriptions_slot_id', 'slot_subscriptions', ['slot_id'])

    op.create_table(
        'trial_bookings',
        id_column(),
        sa.Column('lead_id', sa.String(length=36),
                  sa.ForeignKey('leads.id', ondelete='CASCADE'), nullable=False),
        sa.Column('slot_id', sa.String(length=36),
                  sa.ForeignKey('session_slots.id', ondelete='CASCADE'), nullable=False),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('status', enum_type(
            'trial_status_enum', 'pending', 'confirmed', 'attended', 'no-show', 'cancelled'
        ), nullable=False),
        sa.Column('is_exception', sa.Boolean(), nullable=False),
        sa.Column('confirmation_sent', sa.Boolean(), nullable=False),
        sa.Column('reminder_sent', sa.Boolean(), nullable=False),
        sa.Column('notes', sa.Text(), nullable=True),
        *timestamp_columns(),
        comment='Trial class bookings of leads',
    )
    op.create_index('ix_trial_bookings_lead_id', 'trial_bookings', ['lead_id'])
    op.create_index('ix_trial_bookings_slot_id', 'trial_bookings', ['slot_id'])
    op.create_index('ix_trial_bookings_date', 'trial_bookings', ['date'])

    # ==========================================================================
    # 5. INVENTORY
    # ==========================================================================

    op.create_table(
        'products',
        id_column(),
        sa.Column('name', sa.String(length=200), nullable=False),
        sa.Column('sku', sa.String(length=30), nullable=False),
        sa.Column('category', enum_type(
            'product_category_enum', 'yoga-equipment', 'clothing', 'supplements', 'accessories', 'books', 'other'
        ), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('cost_price', sa.Numeric(10, 2), nullable=False),
        sa.Column('selling_price', sa.Numeric(10, 2), nullable=False),
        sa.Column('current_stock', sa.Integer(), nullable=False),
        sa.Column('low_stock_threshold', sa.Integer(), nullable=False),
        sa.Column('unit', sa.String(length=20), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('barcode', sa.String(length=50), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        *timestamp_columns(),
        comment='Products and stock levels',
    )
    op.create_index('ix_products_sku', 'products', ['sku'], unique=True)
    op.create_index('ix_products_is_active', 'products', ['is_active'])

    op.create_table(
        'inventory_transactions',
        id_column(),
        sa.Column('product_id', sa.String(length=36),
                  sa.ForeignKey('products.id', ondelete='CASCADE'), nullable=False),
        sa.Column('type', enum_type(
            'inventory_transaction_type_enum', 'purchase', 'sale', 'consumed', 'adjustment',
            'returned', 'damaged', 'initial'
        ), nullable=False),
        sa.Column('quantity', sa.Integer(), nullable=False),
        sa.Column('unit_cost', sa.Numeric(10, 2), nullable=False),
        sa.Column('total_value', sa.Numeric(12, 2), nullable=False),
        sa.Column('previous_stock', sa.Integer(), nullable=False),
        sa.Column('new_stock', sa.Integer(), nullable=False),
        sa.Column('transaction_date', sa.Date(), nullable=False),
        sa.Column('invoice_id', sa.String(length=36), nullable=True),
        sa.Column('vendor_name', sa.String(length=200), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        *timestamp_columns(),
        comment='Stock movements',
    )
    op.create_index('ix_inventory_transactions_product_id', 'inventory_transactions', ['product_id'])
    op.create_index('ix_inventory_transactions_type', 'inventory_transactions', ['type'])
    op.create_index('ix_inventory_transactions_transaction_date', 'inventory_transactions', ['transaction_date'])

    # ==========================================================================
    # 6. SESSION PLANNING
    # ==========================================================================

    op.create_table(
        'session_plans',
        id_column(),
        sa.Column('name', sa.String(length=200), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('level', enum_type(
            'session_plan_level_enum', 'beginner', 'intermediate', 'advanced'
        ), nullable=False),
        sa.Column('sections', json_type(), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        *timestamp_columns(),
        comment='Reusable class outlines',
    )

    op.create_table(
        'session_plan_allocations',
        id_column(),
        sa.Column('session_plan_id', sa.String(length=36),
                  sa.ForeignKey('session_plans.id', ondelete='CASCADE'), nullable=False),
        sa.Column('slot_id', sa.String(length=36),
                  sa.ForeignKey('session_slots.id', ondelete='CASCADE'), nullable=False),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('status', enum_type(
            'allocation_status_enum', 'scheduled', 'executed', 'cancelled'
        ), nullable=False),
        sa.Column('execution_id', sa.String(length=36), nullable=True),
        sa.Column('allocated_by', sa.String(length=100), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        *timestamp_columns(),
        sa.UniqueConstraint('slot_id', 'date', name='uq_allocation_slot_date'),
        comment='Session plans allocated to slots',
    )
    op.create_index('ix_session_plan_allocations_session_plan_id', 'session_plan_allocations', ['session_plan_id'])
    op.create_index('ix_session_plan_allocations_date', 'session_plan_allocations', ['date'])

    # ==========================================================================
    # 7. SETTINGS
    # ==========================================================================

    op.create_table(
        'studio_settings',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=False),
        sa.Column('studio_name', sa.String(length=200), nullable=False),
        sa.Column('address', sa.Text(), nullable=True),
        sa.Column('phone', sa.String(length=30), nullable=True),
        sa.Column('email', sa.String(length=255), nullable=True),
        sa.Column('website', sa.String(length=255), nullable=True),
        sa.Column('whatsapp_number', sa.String(length=30), nullable=True),
        sa.Column('logo', sa.Text(), nullable=True),
        sa.Column('currency', sa.String(length=3), nullable=False),
        sa.Column('timezone', sa.String(length=50), nullable=False),
        sa.Column('working_hours', json_type(), nullable=False),
        sa.Column('terms_and_conditions', sa.Text(), nullable=True),
        sa.Column('health_disclaimer', sa.Text(), nullable=True),
        sa.Column('renewal_reminder_days', sa.Integer(), nullable=False),
        sa.Column('class_reminder_hours', sa.Integer(), nullable=False),
        sa.Column('tax_rate', sa.Numeric(5, 2), nullable=False),
        sa.Column('invoice_prefix', sa.String(length=10), nullable=False),
        sa.Column('invoice_start_number', sa.Integer(), nullable=False),
        sa.Column('receipt_prefix', sa.String(length=10), nullable=False),
        sa.Column('receipt_start_number', sa.Integer(), nullable=False),
        sa.Column('invoice_template', json_type(), nullable=False),
        sa.Column('trial_class_enabled', sa.Boolean(), nullable=False),
        sa.Column('max_trials_per_person', sa.Integer(), nullable=False),
        sa.Column('holidays', json_type(), nullable=False),
        sa.Column('whatsapp_templates', json_type(), nullable=False),
        *timestamp_columns(),
        comment='Studio-wide configuration (single row)',
    )


def downgrade() -> None:
    """Downgrade schema."""
    for table in (
        'studio_settings',
        'session_plan_allocations',
        'session_plans',
        'inventory_transactions',
        'products',
        'trial_bookings',
        'slot_subscriptions',
        'payments',
        'membership_subscriptions',
        'invoices',
        'members',
        'leads',
        'membership_plans',
        'session_slots',
    ):
        op.drop_table(table)
