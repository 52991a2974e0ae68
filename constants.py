# constants.py

# Time Settings
DEFAULT_TIME_ZONE = 'Asia/Kolkata'
SLOT_COUNT = 18   # 18 hourly slots
START_HOUR = 5    # 5 AM to 10 PM
DEFAULT_EVENT_DURATION = 50  # minutes
MAX_EVENT_DURATION = 24 * 60
REMINDER_MINUTES = 5

# Slot titles
EMPTY_SLOT_TITLE = 'Empty Slot'
INITIAL_EVENT_TITLES = [
    'HTML', 'CSS', 'JavaScript', 'TypeScript', 'React', 'Next.js', 'Vue.js', 'Angular',
    'Svelte', 'Tailwind CSS', 'Bootstrap', 'Node.js', 'Express.js', 'Django', 'Flask',
    'Spring Boot', 'GraphQL', 'REST API'
]

# YouTube search links
YOUTUBE_SEARCH_URL = 'https://www.youtube.com/results?search_query='
YOUTUBE_PLAYLIST_FILTER = '&sp=EgIQAw%3D%3D'

# Google Sheets layout
SHEET_HEADER = [
    'Time', 'Title', 'YouTube (Hindi)', 'YouTube (English)',
    'Playlist (Hindi)', 'Playlist (English)'
]
SHEET_LAST_COLUMN = 'F'

# API Scopes
GOOGLE_API_SCOPES = [
    'https://www.googleapis.com/auth/calendar',
    'https://www.googleapis.com/auth/spreadsheets'
]

# Environment
CALENDAR_ID_SUFFIX = '_Calendar_ID'
DEFAULT_CALENDAR_ACCOUNT = 'Home'
DEFAULT_REQUEST_TIMEOUT = 30  # seconds per Google API call
