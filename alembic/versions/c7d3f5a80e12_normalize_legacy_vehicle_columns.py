"""normalize_legacy_vehicle_columns

Databases imported from the legacy storefront carry the vehicle columns as
vehicleType / licensePlate, sometimes next to the snake_case pair. Fold
them into vehicle_type / license_plate once and normalize weekday 7 to 0.

Revision ID: c7d3f5a80e12
Revises: a1c4e9d2b7f0
Create Date: 2026-10-19 11:47:05.402766

"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = 'c7d3f5a80e12'
down_revision: Union[str, Sequence[str], None] = 'a1c4e9d2b7f0'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

LEGACY_COLUMNS = {
    'vehicleType': ('vehicle_type', sa.String(length=100)),
    'licensePlate': ('license_plate', sa.String(length=20)),
}


def upgrade() -> None:
    conn = op.get_bind()
    columns = {c['name'] for c in sa.inspect(conn).get_columns('bookings')}

    for legacy, (canonical, column_type) in LEGACY_COLUMNS.items():
        if legacy not in columns:
            continue

        if canonical in columns:
            # Both present: keep canonical values, fill gaps from the legacy column
            op.execute(
                f'UPDATE bookings SET {canonical} = "{legacy}" '
                f'WHERE {canonical} IS NULL AND "{legacy}" IS NOT NULL'
            )
            with op.batch_alter_table('bookings') as batch_op:
                batch_op.drop_column(legacy)
        else:
            with op.batch_alter_table('bookings') as batch_op:
                batch_op.alter_column(legacy, new_column_name=canonical, existing_type=column_type)

    op.execute('UPDATE business_hours SET weekday = 0 WHERE weekday = 7')


def downgrade() -> None:
    # Canonical columns are the target schema; nothing to restore
    pass
