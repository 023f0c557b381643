from tortoise import BaseDBAsyncClient

RUN_IN_TRANSACTION = True


async def upgrade(db: BaseDBAsyncClient) -> str:
    return """
        CREATE TABLE IF NOT EXISTS "daily_content" (
    "id" SERIAL NOT NULL PRIMARY KEY,
    "owner_id" VARCHAR(64) NOT NULL,
    "bucket" DATE NOT NULL,
    "photos" JSONB NOT NULL,
    "captions" JSONB NOT NULL,
    "habit_tags" JSONB NOT NULL,
    "total_photos" INT NOT NULL DEFAULT 0,
    "total_habits" INT NOT NULL DEFAULT 0,
    "submission_count" INT NOT NULL DEFAULT 0,
    "version" INT NOT NULL DEFAULT 0,
    "created_at" TIMESTAMPTZ NOT NULL DEFAULT CURRENT_TIMESTAMP,
    "updated_at" TIMESTAMPTZ NOT NULL DEFAULT CURRENT_TIMESTAMP,
    CONSTRAINT "uid_daily_conte_owner_i_5b1f3e" UNIQUE ("owner_id", "bucket")
);
CREATE INDEX IF NOT EXISTS "idx_daily_conte_owner_i_8d2c41" ON "daily_content" ("owner_id");
COMMENT ON TABLE "daily_content" IS 'All content a user submitted within one day bucket.';
CREATE TABLE IF NOT EXISTS "daily_points" (
    "id" SERIAL NOT NULL PRIMARY KEY,
    "owner_id" VARCHAR(64) NOT NULL,
    "bucket" DATE NOT NULL,
    "gym_completed" BOOL NOT NULL DEFAULT False,
    "sleep_completed" BOOL NOT NULL DEFAULT False,
    "water_completed" BOOL NOT NULL DEFAULT False,
    "run_completed" BOOL NOT NULL DEFAULT False,
    "reflect_completed" BOOL NOT NULL DEFAULT False,
    "cold_shower_completed" BOOL NOT NULL DEFAULT False,
    "meditation_completed" BOOL NOT NULL DEFAULT False,
    "microlearn_completed" BOOL NOT NULL DEFAULT False,
    "liked_today" BOOL NOT NULL DEFAULT False,
    "commented_today" BOOL NOT NULL DEFAULT False,
    "shared_today" BOOL NOT NULL DEFAULT False,
    "updated_goal_today" BOOL NOT NULL DEFAULT False,
    "daily_points" INT NOT NULL DEFAULT 0,
    "core_points" INT NOT NULL DEFAULT 0,
    "bonus_points" INT NOT NULL DEFAULT 0,
    "total_points" INT NOT NULL DEFAULT 0,
    "version" INT NOT NULL DEFAULT 0,
    "created_at" TIMESTAMPTZ NOT NULL DEFAULT CURRENT_TIMESTAMP,
    "updated_at" TIMESTAMPTZ NOT NULL DEFAULT CURRENT_TIMESTAMP,
    CONSTRAINT "uid_daily_point_owner_i_0c7a92" UNIQUE ("owner_id", "bucket")
);
CREATE INDEX IF NOT EXISTS "idx_daily_point_owner_i_3e6f10" ON "daily_points" ("owner_id");
COMMENT ON TABLE "daily_points" IS 'Habit flags and points for one day bucket.';
CREATE TABLE IF NOT EXISTS "user_points_total" (
    "id" SERIAL NOT NULL PRIMARY KEY,
    "owner_id" VARCHAR(64) NOT NULL UNIQUE,
    "total_points" INT NOT NULL DEFAULT 0,
    "updated_at" TIMESTAMPTZ NOT NULL DEFAULT CURRENT_TIMESTAMP
);
COMMENT ON TABLE "user_points_total" IS 'Running total kept for other consumers.';
CREATE TABLE IF NOT EXISTS "aerich" (
    "id" SERIAL NOT NULL PRIMARY KEY,
    "version" VARCHAR(255) NOT NULL,
    "app" VARCHAR(100) NOT NULL,
    "content" JSONB NOT NULL
);"""


async def downgrade(db: BaseDBAsyncClient) -> str:
    return """
        DROP TABLE IF EXISTS "user_points_total";
        DROP TABLE IF EXISTS "daily_points";
        DROP TABLE IF EXISTS "daily_content";
    """
