import secrets

from werkzeug.security import check_password_hash, generate_password_hash

from config import TOKEN_ALPHABET, TOKEN_LENGTH


def generate_token(length: int = TOKEN_LENGTH, alphabet: str = TOKEN_ALPHABET) -> str:
    """生成不可预测的定长令牌，用作会话ID和计时器ID"""
    return "".join(secrets.choice(alphabet) for _ in range(length))


def hash_password(password: str) -> str:
    return generate_password_hash(password, method="pbkdf2:sha256")


def verify_password(password_hash: str, password: str) -> bool:
    return check_password_hash(password_hash, password)
