"""create clients table and change notification trigger

Revision ID: 0001
Revises:
Create Date: 2026-10-19 00:00:00

"""
from alembic import context, op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = "0001"
down_revision = None
branch_labels = None
depends_on = None


def _channel() -> str:
    return context.config.attributes.get("client_changes_channel", "client_changes")


def upgrade() -> None:
    op.create_table(
        "clients",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("secret", sa.String(), nullable=False, server_default=""),
        sa.Column("name", sa.String(), nullable=False, server_default=""),
        sa.Column("redirect_uris", sa.JSON(), nullable=False, server_default="[]"),
        sa.Column("grant_types", sa.JSON(), nullable=False, server_default="[]"),
        sa.Column("response_types", sa.JSON(), nullable=False, server_default="[]"),
        sa.Column("scopes", sa.JSON(), nullable=False, server_default="[]"),
        sa.Column("owner", sa.String(), nullable=False, server_default=""),
        sa.Column("policy_uri", sa.String(), nullable=False, server_default=""),
        sa.Column("tos_uri", sa.String(), nullable=False, server_default=""),
        sa.Column("client_uri", sa.String(), nullable=False, server_default=""),
        sa.Column("logo_uri", sa.String(), nullable=False, server_default=""),
        sa.Column("contacts", sa.JSON(), nullable=False, server_default="[]"),
        sa.Column("public", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime()),
        sa.PrimaryKeyConstraint("id"),
    )

    # Publish {"op", "old_id", "new_id"} for every row change. Rows are read
    # back by the listener; pg_notify payloads are limited to 8000 bytes.
    op.execute(
        f"""
        CREATE OR REPLACE FUNCTION notify_client_change() RETURNS trigger AS $$
        BEGIN
            PERFORM pg_notify(
                '{_channel()}',
                json_build_object(
                    'op', TG_OP,
                    'old_id', CASE WHEN TG_OP = 'INSERT' THEN NULL ELSE OLD.id END,
                    'new_id', CASE WHEN TG_OP = 'DELETE' THEN NULL ELSE NEW.id END
                )::text
            );
            RETURN NULL;
        END;
        $$ LANGUAGE plpgsql;
        """
    )
    op.execute(
        """
        CREATE TRIGGER clients_change_notify
        AFTER INSERT OR UPDATE OR DELETE ON clients
        FOR EACH ROW EXECUTE FUNCTION notify_client_change();
        """
    )


def downgrade() -> None:
    op.execute("DROP TRIGGER IF EXISTS clients_change_notify ON clients")
    op.execute("DROP FUNCTION IF EXISTS notify_client_change()")
    op.drop_table("clients")
