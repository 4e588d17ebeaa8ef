# app/db/mongo.py
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from app.core.config import settings
from app.core.logger import logger


client = AsyncIOMotorClient(settings.MONGODB_URI, tz_aware=True)
db = client[settings.MONGODB_DB]

# Collections
subjects_collection = db.get_collection("subjects")
themes_collection = db.get_collection("themes")
questions_collection = db.get_collection("questions")
specialties_collection = db.get_collection("specialties")
students_collection = db.get_collection("students")
exams_collection = db.get_collection("exams")
solutions_collection = db.get_collection("solutions")


# Function to check DB connection
async def verify_mongodb_connection():
    try:
        await client.server_info()
        logger.info("MongoDB connection established")
    except Exception as e:
        logger.error(f"MongoDB connection failed: {e}")

async def get_db() -> AsyncIOMotorDatabase:
    return db


async def ensure_indexes():
    await subjects_collection.create_index("name", unique=True)
    await themes_collection.create_index("name", unique=True)
    await themes_collection.create_index("subject_id")
    await specialties_collection.create_index("name", unique=True)
    await questions_collection.create_index([("theme_id", 1), ("points", 1)])
    await students_collection.create_index("account_id", unique=True)
    await exams_collection.create_index("start_date")
    await solutions_collection.create_index([("exam_id", 1), ("student_id", 1)])
