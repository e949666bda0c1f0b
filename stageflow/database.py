from databases import Database

from stageflow.config import config

database = Database(config.database_url)
