from .service import SM2Service, decrypt, encrypt, generate_key_pair
