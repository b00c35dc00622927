from decouple import config

FIREBASE_PROJECT_ID = config("FIREBASE_PROJECT_ID", default="")
# host:port of the Firebase Auth emulator. Tokens from the emulator are unsigned.
FIREBASE_AUTH_EMULATOR_HOST = config("FIREBASE_AUTH_EMULATOR_HOST", default="")
