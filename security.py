from passlib.context import CryptContext

import config


# Password hashing using bcrypt
def make_pwd_context(rounds: int | None = None) -> CryptContext:
    return CryptContext(
        schemes=["bcrypt"],
        deprecated="auto",
        bcrypt__rounds=config.BCRYPT_ROUNDS if rounds is None else rounds,
    )


pwd_context = make_pwd_context()


# Helper function to verify a plain-text password against a hashed password
def verify_password(plain_password, hashed_password, context: CryptContext = pwd_context):
    return context.verify(plain_password, hashed_password)


# Helper function to hash a password
def get_password_hash(password, context: CryptContext = pwd_context):
    return context.hash(password)
