import os
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

_SUPABASE_URL = os.getenv('SUPABASE_URL')
_SUPABASE_ANON_KEY = os.getenv('SUPABASE_ANON_KEY') or os.getenv('SUPABASE_KEY')

# Optional: analysis degrades to neutral defaults without it
_HUGGING_FACE_ACCESS_TOKEN = os.getenv('HUGGING_FACE_ACCESS_TOKEN') or None

_SENTIMENT_MODEL_URL = os.getenv(
    'SENTIMENT_MODEL_URL',
    'https://api-inference.huggingface.co/models/distilbert-base-uncased-finetuned-sst-2-english',
)
_EMOTION_MODEL_URL = os.getenv(
    'EMOTION_MODEL_URL',
    'https://api-inference.huggingface.co/models/j-hartmann/emotion-english-distilroberta-base',
)
_INFERENCE_TIMEOUT_SECONDS = float(os.getenv('INFERENCE_TIMEOUT_SECONDS', '30'))

_CORS_ALLOW_ORIGINS = [
    origin.strip()
    for origin in os.getenv('CORS_ALLOW_ORIGINS', '*').split(',')
    if origin.strip()
]

_ANALYSIS_SERVICE_URL = os.getenv('ANALYSIS_SERVICE_URL', 'http://localhost:8000')


class Config:
    """Central configuration for the journal analysis service."""

    SUPABASE_URL = _SUPABASE_URL
    SUPABASE_ANON_KEY = _SUPABASE_ANON_KEY

    HUGGING_FACE_ACCESS_TOKEN = _HUGGING_FACE_ACCESS_TOKEN
    SENTIMENT_MODEL_URL = _SENTIMENT_MODEL_URL
    EMOTION_MODEL_URL = _EMOTION_MODEL_URL
    INFERENCE_TIMEOUT_SECONDS = _INFERENCE_TIMEOUT_SECONDS

    CORS_ALLOW_ORIGINS = _CORS_ALLOW_ORIGINS

    ANALYSIS_SERVICE_URL = _ANALYSIS_SERVICE_URL


settings = Config()
