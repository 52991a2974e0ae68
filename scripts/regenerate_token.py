import sys
import os
# Add project root to Python path
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from google_auth_oauthlib.flow import InstalledAppFlow
import argparse
import pickle
from constants import GOOGLE_API_SCOPES

# Creates the pickled user token read when GOOGLE_TOKEN_FILE is set.
# python scripts/regenerate_token.py --client-secrets credentials.json --output token.pickle


def regenerate_token(client_secrets='credentials.json', output='token.pickle'):
    """Generate new token with offline access for the calendar and spreadsheet scopes."""
    flow = InstalledAppFlow.from_client_secrets_file(
        client_secrets,
        GOOGLE_API_SCOPES
    )

    # Run local server with offline access and consent parameters
    creds = flow.run_local_server(
        port=0,
        access_type='offline',  # Enable offline access
        prompt='consent'  # Force consent screen to get refresh token
    )

    # Save the credentials
    with open(output, 'wb') as token:
        pickle.dump(creds, token)
    print(f"Saved token to {output}")


def main():
    parser = argparse.ArgumentParser(description='Create an OAuth user token for the scheduler')
    parser.add_argument('--client-secrets', default='credentials.json',
                        help='OAuth client secrets file (default: credentials.json)')
    parser.add_argument('--output', default='token.pickle',
                        help='Where to write the pickled token (default: token.pickle)')
    args = parser.parse_args()

    regenerate_token(args.client_secrets, args.output)


if __name__ == '__main__':
    main()
