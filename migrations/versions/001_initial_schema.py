"""Initial catalog schema and genre reference data

Revision ID: 001
Revises: 
Create Date: 2024-11-16 00:00:00.000000

"""
from datetime import datetime, timezone
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

GENRES = [
    ("Pop", "Popular music"),
    ("Rock", "Rock music"),
    ("HipHop", "Hip Hop music"),
    ("Jazz", "Jazz music"),
    ("Classical", "Classical music"),
    ("Electronic", "Electronic music"),
    ("Reggae", "Reggae music"),
    ("Country", "Country music"),
    ("Blues", "Blues music"),
    ("Metal", "Metal music"),
    ("Soul", "Soul music"),
    ("Funk", "Funk music"),
    ("Disco", "Disco music"),
    ("Folk", "Folk music"),
    ("Latin", "Latin music"),
    ("Other", "Other music"),
]


def _timestamps():
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    ]


def upgrade() -> None:
    # Create artists table
    op.create_table(
        "artists",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("biography", sa.Text),
        sa.Column("social_links", postgresql.JSONB),
        sa.Column("location", postgresql.JSONB),
        sa.Column("genres", postgresql.JSONB, nullable=False, server_default=sa.text("'[]'::jsonb")),
        sa.Column("popularity", sa.BigInteger, nullable=False, server_default="0"),
        *_timestamps(),
        sa.UniqueConstraint("email"),
        sa.CheckConstraint("popularity >= 0", name="non_negative_popularity"),
        sa.CheckConstraint("length(name) > 0", name="artist_name_not_empty"),
    )
    op.create_index("idx_artists_name", "artists", ["name"])

    # Create genres table
    op.create_table(
        "genres",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("description", sa.String(255)),
        sa.Column("slug", sa.String(100), nullable=False),
        *_timestamps(),
        sa.UniqueConstraint("name"),
        sa.UniqueConstraint("slug"),
    )

    # Create albums table
    op.create_table(
        "albums",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("artist_id", sa.Integer, nullable=False),
        sa.Column("genres", postgresql.JSONB, nullable=False, server_default=sa.text("'[]'::jsonb")),
        sa.Column("release_date", sa.DateTime(timezone=True)),
        *_timestamps(),
        sa.ForeignKeyConstraint(["artist_id"], ["artists.id"], ondelete="CASCADE"),
    )
    op.create_index("idx_albums_artist_id", "albums", ["artist_id"])
    op.create_index("idx_albums_title", "albums", ["title"])

    # Create singles table
    op.create_table(
        "singles",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("title", sa.String(500), nullable=False),
        sa.Column("artist_id", sa.Integer, nullable=False),
        sa.Column("album_id", sa.Integer),
        sa.Column("genre_id", sa.Integer, nullable=False),
        sa.Column("release_date", sa.DateTime(timezone=True)),
        *_timestamps(),
        sa.ForeignKeyConstraint(["artist_id"], ["artists.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["album_id"], ["albums.id"], ondelete="SET NULL"),
        sa.ForeignKeyConstraint(["genre_id"], ["genres.id"], ondelete="RESTRICT"),
    )
    op.create_index("idx_singles_artist_id", "singles", ["artist_id"])
    op.create_index("idx_singles_album_id", "singles", ["album_id"])
    op.create_index("idx_singles_genre_id", "singles", ["genre_id"])
    op.create_index("idx_singles_title", "singles", ["title"])

    # Featuring artists of a single
    op.create_table(
        "single_featurings",
        sa.Column("single_id", sa.Integer, primary_key=True),
        sa.Column("artist_id", sa.Integer, primary_key=True),
        sa.ForeignKeyConstraint(["single_id"], ["singles.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["artist_id"], ["artists.id"], ondelete="CASCADE"),
    )

    # Create metadata table
    op.create_table(
        "metadata",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("single_id", sa.Integer),
        sa.Column("album_id", sa.Integer),
        sa.Column("cover_url", sa.String(2048), nullable=False),
        sa.Column("lyrics", sa.Text),
        *_timestamps(),
        sa.ForeignKeyConstraint(["single_id"], ["singles.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["album_id"], ["albums.id"], ondelete="CASCADE"),
        sa.UniqueConstraint("single_id"),
        sa.UniqueConstraint("album_id"),
        sa.CheckConstraint(
            "(single_id IS NOT NULL AND album_id IS NULL) OR "
            "(single_id IS NULL AND album_id IS NOT NULL)",
            name="metadata_single_xor_album"
        ),
    )

    # Create copyrights table
    op.create_table(
        "copyrights",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("metadata_id", sa.Integer, nullable=False),
        sa.Column("artist_id", sa.Integer),
        sa.Column("owner_name", sa.String(255)),
        sa.Column("role", sa.String(255), nullable=False),
        sa.Column("percentage", sa.Numeric(6, 3), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(["metadata_id"], ["metadata.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["artist_id"], ["artists.id"], ondelete="SET NULL"),
        sa.CheckConstraint("percentage >= 0 AND percentage <= 100", name="valid_copyright_percentage"),
    )
    op.create_index("idx_copyrights_metadata_id", "copyrights", ["metadata_id"])
    op.create_index("idx_copyrights_artist_id", "copyrights", ["artist_id"])

    # Create stats table
    op.create_table(
        "stats",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("single_id", sa.Integer, nullable=False),
        sa.Column("listens_count", sa.BigInteger, nullable=False, server_default="0"),
        sa.Column("revenue", sa.Numeric(14, 3), nullable=False, server_default="0"),
        *_timestamps(),
        sa.ForeignKeyConstraint(["single_id"], ["singles.id"], ondelete="CASCADE"),
        sa.UniqueConstraint("single_id"),
        sa.CheckConstraint("listens_count >= 0", name="non_negative_listens"),
    )

    # Seed genre reference data
    genres_table = sa.table(
        "genres",
        sa.column("name", sa.String),
        sa.column("description", sa.String),
        sa.column("slug", sa.String),
        sa.column("created_at", sa.DateTime(timezone=True)),
        sa.column("updated_at", sa.DateTime(timezone=True)),
    )
    now = datetime.now(timezone.utc)
    op.bulk_insert(
        genres_table,
        [
            {
                "name": name,
                "description": description,
                "slug": name.lower(),
                "created_at": now,
                "updated_at": now,
            }
            for name, description in GENRES
        ],
    )


def downgrade() -> None:
    # Drop tables in reverse order
    op.drop_table("stats")
    op.drop_table("copyrights")
    op.drop_table("metadata")
    op.drop_table("single_featurings")
    op.drop_table("singles")
    op.drop_table("albums")
    op.drop_table("genres")
    op.drop_table("artists")
