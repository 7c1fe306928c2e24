from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '20260301_create_auto_tables'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        'auto',
        sa.Column('id', sa.Integer, primary_key=True),
        sa.Column('version', sa.Integer(), nullable=False),
        sa.Column('vin', sa.String(17), nullable=False, unique=True),
        sa.Column('horsepower', sa.Integer(), nullable=False),
        sa.Column('kind', sa.Enum('SUV', 'LIMOUSINE', 'CABRIO', name='autokind'), nullable=True),
        sa.Column('price', sa.Numeric(8, 2), nullable=False),
        sa.Column('discount', sa.Numeric(4, 3), nullable=True),
        sa.Column('available', sa.Boolean(), nullable=False),
        sa.Column('release_date', sa.Date(), nullable=True),
        sa.Column('homepage', sa.String(), nullable=True),
        sa.Column('keywords', sa.Text(), nullable=True),
        sa.Column('created', sa.DateTime(), nullable=False),
        sa.Column('updated', sa.DateTime(), nullable=False)
    )

    op.create_table(
        'auto_model',
        sa.Column('id', sa.Integer, primary_key=True),
        sa.Column('name', sa.String(40), nullable=False),
        sa.Column('subtitle', sa.String(40), nullable=True),
        sa.Column('auto_id', sa.Integer, sa.ForeignKey('auto.id', ondelete='CASCADE'), nullable=False, unique=True)
    )

    op.create_table(
        'image',
        sa.Column('id', sa.Integer, primary_key=True),
        sa.Column('caption', sa.String(32), nullable=False),
        sa.Column('content_type', sa.String(16), nullable=True),
        sa.Column('auto_id', sa.Integer, sa.ForeignKey('auto.id', ondelete='CASCADE'), nullable=False)
    )
    op.create_index('ix_image_auto_id', 'image', ['auto_id'])

    op.create_table(
        'auto_file',
        sa.Column('id', sa.Integer, primary_key=True),
        sa.Column('filename', sa.String(), nullable=False),
        sa.Column('mimetype', sa.String(), nullable=True),
        sa.Column('data', sa.LargeBinary(), nullable=False),
        sa.Column('auto_id', sa.Integer, sa.ForeignKey('auto.id', ondelete='CASCADE'), nullable=False, unique=True)
    )


def downgrade():
    op.drop_table('auto_file')
    op.drop_index('ix_image_auto_id', table_name='image')
    op.drop_table('image')
    op.drop_table('auto_model')
    op.drop_table('auto')
    sa.Enum(name='autokind').drop(op.get_bind(), checkfirst=True)
