"""Initial schema: accounts, audit trail, asset modules, helpdesk, feedback

Revision ID: 20261019_initial
Revises:
Create Date: 2026-10-19

This migration creates:
1. users and activity_logs (identity and audit trail)
2. it_check_entries with speed_tests and installed_apps
3. software_licenses with software_addins
4. password vault: categories, entries, custom fields, secure notes
5. tickets, ticket_comments and the per-day ticket_sequence
6. credit_blocks and the two work logs
7. feedback_links and feedback_responses
"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '20261019_initial'
down_revision = None
branch_labels = None
depends_on = None


def _timestamps(updated=True):
    columns = [sa.Column('created_at', sa.DateTime(), nullable=False)]
    if updated:
        columns.append(sa.Column('updated_at', sa.DateTime(), nullable=False))
    return columns


def _user_fk(name):
    return sa.Column(name, sa.String(length=64), sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True)


def _worklog_columns():
    return [
        sa.Column('id', sa.String(length=64), nullable=False),
        sa.Column('id_code', sa.String(length=64), nullable=False),
        sa.Column('client_name', sa.String(length=255), nullable=False),
        sa.Column('subject_issue', sa.Text(), nullable=True),
        sa.Column('category', sa.String(length=128), nullable=True),
        sa.Column('date_started', sa.Date(), nullable=True),
        sa.Column('time_started', sa.String(length=16), nullable=True),
        sa.Column('date_finished', sa.Date(), nullable=True),
        sa.Column('time_finished', sa.String(length=16), nullable=True),
        sa.Column('technician_name', sa.String(length=255), nullable=True),
        sa.Column('resolution_details', sa.Text(), nullable=True),
        sa.Column('remarks', sa.Text(), nullable=True),
        sa.Column('status', sa.String(length=32), nullable=True),
        sa.Column('time_consumed_minutes', sa.Integer(), nullable=True),
        sa.Column('total_time_charge_minutes', sa.Integer(), nullable=True),
        _user_fk('added_by_id'),
        *_timestamps(),
    ]


def upgrade():
    # ==========================================================================
    # 1. USERS AND AUDIT TRAIL
    # ==========================================================================
    op.create_table('users',
        sa.Column('id', sa.String(length=64), nullable=False),
        sa.Column('username', sa.String(length=64), nullable=False),
        sa.Column('password_hash', sa.String(length=255), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('role', sa.String(length=32), nullable=False),
        sa.Column('module_permissions', sa.Text(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
    )
    with op.batch_alter_table('users', schema=None) as batch_op:
        batch_op.create_index(batch_op.f('ix_users_username'), ['username'], unique=True)
        batch_op.create_index(batch_op.f('ix_users_role'), ['role'], unique=False)

    op.create_table('activity_logs',
        sa.Column('id', sa.String(length=64), nullable=False),
        _user_fk('user_id'),
        sa.Column('action', sa.String(length=64), nullable=False),
        sa.Column('target_id', sa.String(length=128), nullable=True),
        sa.Column('target_name', sa.String(length=255), nullable=True),
        sa.Column('details', sa.Text(), nullable=True),
        *_timestamps(updated=False),
        sa.PrimaryKeyConstraint('id'),
    )
    with op.batch_alter_table('activity_logs', schema=None) as batch_op:
        batch_op.create_index(batch_op.f('ix_activity_logs_user_id'), ['user_id'], unique=False)
        batch_op.create_index(batch_op.f('ix_activity_logs_action'), ['action'], unique=False)
        batch_op.create_index('ix_activity_logs_created', ['created_at'], unique=False)

    # ==========================================================================
    # 2. IT CHECK ENTRIES
    # ==========================================================================
    op.create_table('it_check_entries',
        sa.Column('id', sa.String(length=64), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('department', sa.String(length=255), nullable=False),
        sa.Column('batch_number', sa.String(length=64), nullable=True),
        sa.Column('computer_type', sa.String(length=64), nullable=True),
        sa.Column('it_check_completed', sa.String(length=64), nullable=True),
        sa.Column('ip_address', sa.String(length=64), nullable=True),
        sa.Column('isp', sa.String(length=255), nullable=True),
        sa.Column('connection_type', sa.String(length=64), nullable=True),
        sa.Column('operating_system', sa.String(length=255), nullable=True),
        sa.Column('processor_brand', sa.String(length=64), nullable=True),
        sa.Column('processor_series', sa.String(length=64), nullable=True),
        sa.Column('processor_generation', sa.String(length=64), nullable=True),
        sa.Column('processor_mac', sa.String(length=64), nullable=True),
        sa.Column('memory', sa.String(length=64), nullable=True),
        sa.Column('graphics', sa.String(length=255), nullable=True),
        sa.Column('storage', sa.String(length=255), nullable=True),
        sa.Column('pc_model', sa.String(length=255), nullable=True),
        sa.Column('status', sa.String(length=32), nullable=True),
        _user_fk('added_by_id'),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_it_check_entries_created', 'it_check_entries', ['created_at'], unique=False)

    op.create_table('speed_tests',
        sa.Column('id', sa.String(length=128), nullable=False),
        sa.Column('it_check_entry_id', sa.String(length=64), nullable=False),
        sa.Column('url', sa.String(length=512), nullable=True),
        sa.Column('download_speed', sa.Float(), nullable=True),
        sa.Column('upload_speed', sa.Float(), nullable=True),
        sa.Column('ping', sa.Float(), nullable=True),
        sa.Column('test_order', sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(['it_check_entry_id'], ['it_check_entries.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_speed_tests_it_check_entry_id', 'speed_tests', ['it_check_entry_id'], unique=False)

    op.create_table('installed_apps',
        sa.Column('id', sa.String(length=128), nullable=False),
        sa.Column('it_check_entry_id', sa.String(length=64), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=True),
        sa.Column('version', sa.String(length=64), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('position', sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(['it_check_entry_id'], ['it_check_entries.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_installed_apps_it_check_entry_id', 'installed_apps', ['it_check_entry_id'], unique=False)

    # ==========================================================================
    # 3. SOFTWARE LICENSES
    # ==========================================================================
    op.create_table('software_licenses',
        sa.Column('id', sa.String(length=64), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('vendor', sa.String(length=255), nullable=True),
        sa.Column('version', sa.String(length=64), nullable=True),
        sa.Column('license_type', sa.String(length=64), nullable=True),
        sa.Column('total_licenses', sa.Integer(), nullable=True),
        sa.Column('used_licenses', sa.Integer(), nullable=True),
        sa.Column('purchase_date', sa.Date(), nullable=True),
        sa.Column('expiry_date', sa.Date(), nullable=True),
        sa.Column('cost', sa.Numeric(12, 2), nullable=True),
        sa.Column('license_key', sa.Text(), nullable=False),
        sa.Column('assigned_users', sa.Text(), nullable=True),
        sa.Column('status', sa.String(length=32), nullable=False, server_default='active'),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('entity', sa.String(length=255), nullable=True),
        sa.Column('department', sa.String(length=255), nullable=True),
        _user_fk('added_by_id'),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_software_licenses_created', 'software_licenses', ['created_at'], unique=False)

    op.create_table('software_addins',
        sa.Column('id', sa.String(length=128), nullable=False),
        sa.Column('license_id', sa.String(length=64), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=True),
        sa.Column('cost', sa.Numeric(12, 2), nullable=True),
        sa.Column('total_licenses', sa.Integer(), nullable=True),
        sa.Column('used_licenses', sa.Integer(), nullable=True),
        sa.Column('purchase_date', sa.Date(), nullable=True),
        sa.Column('expiry_date', sa.Date(), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('position', sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(['license_id'], ['software_licenses.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_software_addins_license_id', 'software_addins', ['license_id'], unique=False)

    # ==========================================================================
    # 4. PASSWORD VAULT (secrets stored as Fernet ciphertext)
    # ==========================================================================
    op.create_table('password_categories',
        sa.Column('id', sa.String(length=64), nullable=False),
        sa.Column('name', sa.String(length=128), nullable=False),
        sa.Column('icon', sa.String(length=64), nullable=True),
        sa.Column('color', sa.String(length=32), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )

    op.create_table('password_entries',
        sa.Column('id', sa.String(length=64), nullable=False),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('website', sa.String(length=512), nullable=True),
        sa.Column('username', sa.String(length=255), nullable=True),
        sa.Column('email', sa.String(length=255), nullable=True),
        sa.Column('password_encrypted', sa.Text(), nullable=False),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('category_id', sa.String(length=64), nullable=True),
        sa.Column('is_favorite', sa.Boolean(), nullable=False, server_default='0'),
        sa.Column('is_compromised', sa.Boolean(), nullable=False, server_default='0'),
        sa.Column('last_used', sa.DateTime(), nullable=True),
        sa.Column('tags', sa.Text(), nullable=True),
        _user_fk('created_by_id'),
        *_timestamps(),
        sa.ForeignKeyConstraint(['category_id'], ['password_categories.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_password_entries_created', 'password_entries', ['created_at'], unique=False)

    op.create_table('password_custom_fields',
        sa.Column('id', sa.String(length=128), nullable=False),
        sa.Column('password_entry_id', sa.String(length=64), nullable=False),
        sa.Column('label', sa.String(length=255), nullable=False),
        sa.Column('value_encrypted', sa.Text(), nullable=False),
        sa.Column('field_type', sa.String(length=32), nullable=False, server_default='text'),
        sa.Column('is_hidden', sa.Boolean(), nullable=False, server_default='0'),
        sa.Column('position', sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(['password_entry_id'], ['password_entries.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_password_custom_fields_password_entry_id', 'password_custom_fields', ['password_entry_id'], unique=False)

    op.create_table('secure_notes',
        sa.Column('id', sa.String(length=64), nullable=False),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('content_encrypted', sa.Text(), nullable=False),
        sa.Column('category', sa.String(length=64), nullable=True),
        sa.Column('is_favorite', sa.Boolean(), nullable=False, server_default='0'),
        sa.Column('tags', sa.Text(), nullable=True),
        _user_fk('created_by_id'),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
    )

    # ==========================================================================
    # 5. TICKETS
    # ==========================================================================
    op.create_table('ticket_sequence',
        sa.Column('seq_date', sa.Date(), nullable=False),
        sa.Column('last_number', sa.Integer(), nullable=False, server_default='0'),
        sa.PrimaryKeyConstraint('seq_date'),
    )

    op.create_table('tickets',
        sa.Column('id', sa.String(length=64), nullable=False),
        sa.Column('ticket_number', sa.String(length=64), nullable=False),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('status', sa.String(length=32), nullable=False, server_default='open'),
        sa.Column('priority', sa.String(length=32), nullable=False, server_default='medium'),
        sa.Column('category', sa.String(length=64), nullable=False),
        _user_fk('assigned_to_id'),
        _user_fk('created_by_id'),
        sa.Column('due_date', sa.Date(), nullable=True),
        sa.Column('resolved_at', sa.DateTime(), nullable=True),
        sa.Column('parent_ticket_id', sa.String(length=64), nullable=True),
        sa.Column('labels', sa.Text(), nullable=True),
        sa.Column('sla_breached', sa.Boolean(), nullable=False, server_default='0'),
        sa.Column('response_time_minutes', sa.Integer(), nullable=True),
        sa.Column('resolution_time_minutes', sa.Integer(), nullable=True),
        sa.Column('is_being_viewed', sa.Boolean(), nullable=False, server_default='0'),
        sa.Column('viewed_by', sa.Text(), nullable=True),
        sa.Column('last_viewed_at', sa.DateTime(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['parent_ticket_id'], ['tickets.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('ticket_number', name='uq_tickets_ticket_number'),
    )
    with op.batch_alter_table('tickets', schema=None) as batch_op:
        batch_op.create_index('ix_tickets_created', ['created_at'], unique=False)
        batch_op.create_index('ix_tickets_parent', ['parent_ticket_id'], unique=False)

    op.create_table('ticket_comments',
        sa.Column('id', sa.String(length=64), nullable=False),
        sa.Column('ticket_id', sa.String(length=64), nullable=False),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('is_private', sa.Boolean(), nullable=False, server_default='0'),
        _user_fk('created_by_id'),
        *_timestamps(),
        sa.ForeignKeyConstraint(['ticket_id'], ['tickets.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_ticket_comments_ticket_id', 'ticket_comments', ['ticket_id'], unique=False)

    # ==========================================================================
    # 6. CREDITS AND WORK LOGS
    # ==========================================================================
    op.create_table('credit_blocks',
        sa.Column('id', sa.String(length=64), nullable=False),
        sa.Column('block_number', sa.Integer(), nullable=False),
        sa.Column('purchase_date', sa.Date(), nullable=True),
        sa.Column('total_credits', sa.Numeric(12, 2), nullable=False, server_default='0'),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default='1'),
        _user_fk('added_by_id'),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_credit_blocks_block_number', 'credit_blocks', ['block_number'], unique=False)

    op.create_table('chapmancg_log_entries',
        *_worklog_columns(),
        sa.Column('credit_consumed', sa.Numeric(12, 2), nullable=True),
        sa.Column('total_credit_consumed', sa.Numeric(12, 2), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_chapmancg_log_entries_id_code', 'chapmancg_log_entries', ['id_code'], unique=False)

    op.create_table('internal_log_entries',
        *_worklog_columns(),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_internal_log_entries_id_code', 'internal_log_entries', ['id_code'], unique=False)

    # ==========================================================================
    # 7. CUSTOMER FEEDBACK
    # ==========================================================================
    op.create_table('feedback_links',
        sa.Column('id', sa.String(length=64), nullable=False),
        sa.Column('link_id', sa.String(length=128), nullable=False),
        sa.Column('staff_name', sa.String(length=255), nullable=True),
        sa.Column('customer_name', sa.String(length=255), nullable=False),
        sa.Column('client', sa.String(length=255), nullable=True),
        sa.Column('task_name', sa.String(length=255), nullable=True),
        sa.Column('generated_link', sa.String(length=1024), nullable=False),
        sa.Column('is_used', sa.Boolean(), nullable=False, server_default='0'),
        sa.Column('used_at', sa.DateTime(), nullable=True),
        _user_fk('created_by_id'),
        *_timestamps(updated=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_feedback_links_link_id', 'feedback_links', ['link_id'], unique=True)

    op.create_table('feedback_responses',
        sa.Column('id', sa.String(length=64), nullable=False),
        sa.Column('feedback_link_id', sa.String(length=64), nullable=False),
        sa.Column('rating', sa.Integer(), nullable=True),
        sa.Column('comments', sa.Text(), nullable=True),
        sa.Column('client_name', sa.String(length=255), nullable=True),
        sa.Column('client_email', sa.String(length=255), nullable=True),
        sa.Column('client_company', sa.String(length=255), nullable=True),
        sa.Column('submitted_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['feedback_link_id'], ['feedback_links.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_feedback_responses_feedback_link_id', 'feedback_responses', ['feedback_link_id'], unique=False)


def downgrade():
    # Drop tables in reverse order of creation (respect foreign keys)
    op.drop_table('feedback_responses')
    op.drop_table('feedback_links')
    op.drop_table('internal_log_entries')
    op.drop_table('chapmancg_log_entries')
    op.drop_table('credit_blocks')
    op.drop_table('ticket_comments')
    op.drop_table('tickets')
    op.drop_table('ticket_sequence')
    op.drop_table('secure_notes')
    op.drop_table('password_custom_fields')
    op.drop_table('password_entries')
    op.drop_table('password_categories')
    op.drop_table('software_addins')
    op.drop_table('software_licenses')
    op.drop_table('installed_apps')
    op.drop_table('speed_tests')
    op.drop_table('it_check_entries')
    op.drop_table('activity_logs')
    op.drop_table('users')
