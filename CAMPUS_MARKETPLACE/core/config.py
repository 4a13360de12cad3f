import os
from dotenv import load_dotenv

load_dotenv()

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./campus_market.db")

ADMIN_API_KEY = os.getenv("ADMIN_API_KEY")
ADMIN_NAME    = os.getenv("ADMIN_NAME", "admin")

# PIN format: YY030-BRANCH-SEQ
INSTITUTION_CODE   = "030"
PIN_SEQUENCE_WIDTH = 3
BRANCH_CODES       = ["CME", "CE", "M", "ECE", "EEE", "CIOT", "AIML"]
ACADEMIC_YEARS     = [1, 2, 3]
MIN_JOINING_YEAR   = 2000
MAX_JOINING_YEAR   = 2100
MAX_SECTION_LENGTH = 10

MAX_PINS_PER_REQUEST = int(os.getenv("MAX_PINS_PER_REQUEST", "500"))

# "transactional" deletes PIN + account + listings in one commit,
# "stepwise" commits listings + account, then the PIN, and reports partial failures
CASCADE_DELETE_MODE = os.getenv("CASCADE_DELETE_MODE", "transactional").lower()

PRODUCT_CATEGORIES   = ["books", "stationary", "electronics", "others"]
MAX_IMAGES_PER_PRODUCT = int(os.getenv("MAX_IMAGES_PER_PRODUCT", "5"))
