"""Create staff, attendance, compensation and salary slip tables

Revision ID: 0001_create_payroll_tables
Revises:
Create Date: 2026-10-01 09:00:00.000000

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '0001_create_payroll_tables'
down_revision = None
branch_labels = None
depends_on = None

staff_status = sa.Enum(
    'active', 'inactive', 'on_leave', 'terminated', 'suspended', name='staffstatus'
)
work_log_status = sa.Enum('present', 'late', 'absent', 'half_day', name='worklogstatus')
leave_approval_status = sa.Enum('pending', 'approved', 'rejected', name='leaveapprovalstatus')
calculation_type = sa.Enum('fixed', 'percentage', name='calculationtype')
salary_slip_status = sa.Enum('generated', 'paid', name='salaryslipstatus')
payment_method = sa.Enum('bank_transfer', 'check', 'cash', name='paymentmethod')


def timestamps():
    return [
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
    ]


def assignment_columns():
    return [
        sa.Column('calculation_type', calculation_type, nullable=False),
        sa.Column('amount', sa.Numeric(12, 2), nullable=False),
        sa.Column('effective_from', sa.Date(), nullable=False),
        sa.Column('effective_until', sa.Date(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('notes', sa.Text(), nullable=True),
    ]


def upgrade():
    op.create_table(
        'staff_members',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('staff_code', sa.String(32), nullable=False),
        sa.Column('full_name', sa.String(200), nullable=False),
        sa.Column('email', sa.String(200), unique=True),
        sa.Column('org_id', sa.Integer()),
        sa.Column('company_id', sa.Integer()),
        sa.Column('base_salary', sa.Numeric(12, 2), nullable=True),
        sa.Column('status', staff_status, nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        *timestamps(),
    )
    op.create_index('ix_staff_members_staff_code', 'staff_members', ['staff_code'], unique=True)
    op.create_index('ix_staff_members_org_id', 'staff_members', ['org_id'])
    op.create_index('ix_staff_members_company_id', 'staff_members', ['company_id'])

    op.create_table(
        'working_days',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('org_id', sa.Integer(), nullable=True),
        sa.Column('company_id', sa.Integer(), nullable=True),
        sa.Column('staff_member_id', sa.Integer(), sa.ForeignKey('staff_members.id'), nullable=True),
        sa.Column('monday', sa.Boolean(), nullable=False),
        sa.Column('tuesday', sa.Boolean(), nullable=False),
        sa.Column('wednesday', sa.Boolean(), nullable=False),
        sa.Column('thursday', sa.Boolean(), nullable=False),
        sa.Column('friday', sa.Boolean(), nullable=False),
        sa.Column('saturday', sa.Boolean(), nullable=False),
        sa.Column('sunday', sa.Boolean(), nullable=False),
        sa.Column('from_date', sa.Date(), nullable=True),
        sa.Column('to_date', sa.Date(), nullable=True),
        *timestamps(),
    )
    op.create_index('ix_working_days_org_id', 'working_days', ['org_id'])
    op.create_index('ix_working_days_staff_member_id', 'working_days', ['staff_member_id'])

    op.create_table(
        'work_logs',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('staff_member_id', sa.Integer(), sa.ForeignKey('staff_members.id'), nullable=False),
        sa.Column('log_date', sa.Date(), nullable=False),
        sa.Column('status', work_log_status, nullable=False),
        sa.Column('late_minutes', sa.Integer(), nullable=False),
        sa.Column('overtime_minutes', sa.Integer(), nullable=False),
        *timestamps(),
    )
    op.create_index('ix_work_logs_staff_date', 'work_logs', ['staff_member_id', 'log_date'])

    op.create_table(
        'time_off_categories',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('title', sa.String(100), nullable=False),
        sa.Column('is_paid', sa.Boolean(), nullable=False),
        *timestamps(),
    )

    op.create_table(
        'time_off_requests',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('staff_member_id', sa.Integer(), sa.ForeignKey('staff_members.id'), nullable=False),
        sa.Column('category_id', sa.Integer(), sa.ForeignKey('time_off_categories.id'), nullable=False),
        sa.Column('start_date', sa.Date(), nullable=False),
        sa.Column('end_date', sa.Date(), nullable=False),
        sa.Column('approval_status', leave_approval_status, nullable=False),
        *timestamps(),
    )
    op.create_index(
        'ix_time_off_requests_staff_dates',
        'time_off_requests',
        ['staff_member_id', 'start_date', 'end_date'],
    )

    op.create_table(
        'benefit_types',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('title', sa.String(100), nullable=False),
        sa.Column('is_taxable', sa.Boolean(), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        *timestamps(),
    )

    op.create_table(
        'staff_benefits',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('staff_member_id', sa.Integer(), sa.ForeignKey('staff_members.id'), nullable=False),
        sa.Column('benefit_type_id', sa.Integer(), sa.ForeignKey('benefit_types.id'), nullable=False),
        *assignment_columns(),
        *timestamps(),
    )
    op.create_index(
        'ix_staff_benefits_staff_active', 'staff_benefits', ['staff_member_id', 'is_active']
    )

    op.create_table(
        'withholding_types',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('title', sa.String(100), nullable=False),
        sa.Column('is_statutory', sa.Boolean(), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        *timestamps(),
    )

    op.create_table(
        'recurring_deductions',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('staff_member_id', sa.Integer(), sa.ForeignKey('staff_members.id'), nullable=False),
        sa.Column('withholding_type_id', sa.Integer(), sa.ForeignKey('withholding_types.id'), nullable=False),
        *assignment_columns(),
        *timestamps(),
    )
    op.create_index(
        'ix_recurring_deductions_staff_active',
        'recurring_deductions',
        ['staff_member_id', 'is_active'],
    )

    op.create_table(
        'salary_slips',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('slip_reference', sa.String(64), nullable=False, unique=True),
        sa.Column('staff_member_id', sa.Integer(), sa.ForeignKey('staff_members.id'), nullable=False),
        sa.Column('salary_period', sa.String(7), nullable=False),
        sa.Column('basic_salary', sa.Numeric(12, 2), nullable=False),
        sa.Column('benefits_breakdown', sa.JSON(), nullable=False),
        sa.Column('deductions_breakdown', sa.JSON(), nullable=False),
        sa.Column('attendance_snapshot', sa.JSON(), nullable=True),
        sa.Column('lop_days', sa.Numeric(5, 1), nullable=False),
        sa.Column('total_earnings', sa.Numeric(12, 2), nullable=False),
        sa.Column('total_deductions', sa.Numeric(12, 2), nullable=False),
        sa.Column('net_payable', sa.Numeric(12, 2), nullable=False),
        sa.Column('status', salary_slip_status, nullable=False),
        sa.Column('generated_at', sa.DateTime(), nullable=False),
        sa.Column('paid_at', sa.DateTime(), nullable=True),
        sa.Column('payment_method', payment_method, nullable=True),
        sa.Column('payment_reference', sa.String(100), nullable=True),
        *timestamps(),
        sa.UniqueConstraint('staff_member_id', 'salary_period', name='uq_salary_slip_staff_period'),
    )
    op.create_index('ix_salary_slips_period_status', 'salary_slips', ['salary_period', 'status'])


def downgrade():
    op.drop_table('salary_slips')
    op.drop_table('recurring_deductions')
    op.drop_table('withholding_types')
    op.drop_table('staff_benefits')
    op.drop_table('benefit_types')
    op.drop_table('time_off_requests')
    op.drop_table('time_off_categories')
    op.drop_table('work_logs')
    op.drop_table('working_days')
    op.drop_table('staff_members')

    bind = op.get_bind()
    for enum in (
        payment_method,
        salary_slip_status,
        calculation_type,
        leave_approval_status,
        work_log_status,
        staff_status,
    ):
        enum.drop(bind, checkfirst=True)
