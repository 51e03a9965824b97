# config.py
import os
from pathlib import Path

from dotenv import load_dotenv

BASE_DIR = Path(__file__).resolve().parent.parent

load_dotenv(os.path.join(BASE_DIR, '.env'))


class Config:
    SUPABASE_URL = os.getenv('SUPABASE_URL')
    SUPABASE_SERVICE_KEY = os.getenv('SUPABASE_SERVICE_KEY')
    SUPABASE_JWT_SECRET = os.getenv('SUPABASE_JWT_SECRET')
    SUPABASE_POSTGRES_CONNECTION = os.getenv('SUPABASE_POSTGRES_CONNECTION')

    # Verse-by-reference service, addressed by book name
    VERSE_API_URL = os.getenv('VERSE_API_URL', 'https://bible-api.com')
    # Books/chapters service, addressed by abbreviation; optional
    BOOKS_API_URL = os.getenv('BOOKS_API_URL')
    # Which upstream serves chapter text: 'verse-api' or 'books-api'
    CHAPTER_SOURCE = os.getenv('CHAPTER_SOURCE', 'verse-api')

    DEFAULT_TRANSLATION = os.getenv('DEFAULT_TRANSLATION', 'kjv')
    UPSTREAM_TIMEOUT = float(os.getenv('UPSTREAM_TIMEOUT', '10'))
    CHAPTER_FETCH_WORKERS = int(os.getenv('CHAPTER_FETCH_WORKERS', '4'))

    PORT = int(os.getenv('PORT', '5001'))
