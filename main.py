import sys

from sm2_cipher import SM2Error, SM2Service

USAGE = """Usage:
  python main.py --test
  python main.py --generate-keypair
  python main.py --encrypt <plaintext> --public-key <publicKey> [--mode C1C3C2|C1C2C3]
  python main.py --decrypt <encryptedData> --private-key <privateKey>"""


def main(argv=None):
    args = sys.argv[1:] if argv is None else argv

    if not args:
        print(USAGE, file=sys.stderr)
        return 1

    try:
        if args == ["--test"]:
            if not SM2Service.is_available():
                print("[-] SM2 self-test failed", file=sys.stderr)
                return 1
            print("SM2 Encryption/Decryption Service is available")
            return 0

        if args == ["--generate-keypair"]:
            private_key, public_key = SM2Service.generate_key_pair()
            print(f"Private Key: {private_key}")
            print(f"Public Key: {public_key}")
            return 0

        if len(args) in (4, 6) and args[0] == "--encrypt" and args[2] == "--public-key":
            mode = None
            if len(args) == 6:
                if args[4] != "--mode":
                    raise ValueError(f"Unexpected argument: {args[4]}")
                mode = args[5]
            # Plaintext goes through untouched, empty and whitespace included
            service = SM2Service(public_key=args[3], mode=mode)
            print(service.encrypt(args[1]))
            return 0

        if len(args) == 4 and args[0] == "--decrypt" and args[2] == "--private-key":
            service = SM2Service(private_key=args[3])
            print(service.decrypt_bytes(args[1]).decode("utf-8", errors="replace"))
            return 0
    except (SM2Error, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print("Invalid arguments.", file=sys.stderr)
    print(USAGE, file=sys.stderr)
    return 1


if __name__ == "__main__":
    sys.exit(main())
