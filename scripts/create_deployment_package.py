import os
import shutil
import subprocess
import sys
import venv
import boto3
import argparse

# Build and upload:
# python scripts/create_deployment_package.py --recreate --function-name studySlotScheduler

# To just send the existing zip to AWS:
# python scripts/create_deployment_package.py --function-name studySlotScheduler

PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
PACKAGES = ['platforms', 'handlers']
MODULES = [
    'lambda_function.py', 'handler.py', 'auth.py', 'config.py', 'constants.py',
    'date_utils.py', 'errors.py', 'slots.py'
]
DEPENDENCIES = [
    'google-api-python-client',
    'google-auth',
    'google-auth-httplib2',
    'google-auth-oauthlib',
    'httplib2',
    'pytz'
]


def create_deployment_package(function_name, region, recreate_all=True):
    """
    Create a deployment package for AWS Lambda and upload it

    Args:
        function_name: Lambda function to update
        region: AWS region of the function
        recreate_all: Boolean, if True recreates venv and zip file, if False uses existing ones
    """
    venv_dir = os.path.join(PROJECT_ROOT, 'temp_venv')
    package_dir = os.path.join(PROJECT_ROOT, 'build_package')
    zip_base = os.path.join(PROJECT_ROOT, 'deployment_package')
    zip_file = zip_base + '.zip'

    try:
        if recreate_all:
            print("Creating fresh deployment package...")
            if os.path.exists(venv_dir):
                shutil.rmtree(venv_dir)
            venv.create(venv_dir, with_pip=True)

            if sys.platform == 'win32':
                pip_path = os.path.join(venv_dir, 'Scripts', 'pip.exe')
            else:
                pip_path = os.path.join(venv_dir, 'bin', 'pip')

            if os.path.exists(package_dir):
                shutil.rmtree(package_dir)
            os.makedirs(package_dir)

            for package in PACKAGES:
                shutil.copytree(os.path.join(PROJECT_ROOT, package), os.path.join(package_dir, package),
                                ignore=shutil.ignore_patterns('__pycache__'))
            for module in MODULES:
                shutil.copy(os.path.join(PROJECT_ROOT, module), os.path.join(package_dir, module))

            # Install dependencies to the package directory using the clean virtual environment
            subprocess.check_call([pip_path, 'install', '--target', package_dir] + DEPENDENCIES)

            if os.path.exists(zip_file):
                os.remove(zip_file)
            shutil.make_archive(zip_base, 'zip', package_dir)
            print(f"Created {zip_file}")
        else:
            print("Using existing deployment package...")
            if not os.path.exists(zip_file):
                raise FileNotFoundError(f"Cannot find {zip_file}. Run with --recreate flag to create it.")

        # boto3 picks up credentials from aws configure
        print(f"Uploading to Lambda function {function_name}...")
        lambda_client = boto3.client('lambda', region_name=region)

        with open(zip_file, 'rb') as archive:
            lambda_client.update_function_code(
                FunctionName=function_name,
                ZipFile=archive.read()
            )

        print("Successfully updated Lambda function")

    finally:
        if recreate_all:
            print("Cleaning up temporary files...")
            if os.path.exists(package_dir):
                shutil.rmtree(package_dir)
            if os.path.exists(venv_dir):
                shutil.rmtree(venv_dir)


def main():
    parser = argparse.ArgumentParser(description='Create and deploy Lambda package')
    parser.add_argument('--recreate', action='store_true',
                        help='Recreate virtual environment and zip file (default: False)')
    parser.add_argument('--function-name', default=os.environ.get('LAMBDA_FUNCTION_NAME', 'studySlotScheduler'),
                        help='Lambda function name (default: $LAMBDA_FUNCTION_NAME or studySlotScheduler)')
    parser.add_argument('--region', default=os.environ.get('AWS_DEFAULT_REGION', 'ap-south-1'),
                        help='AWS region (default: $AWS_DEFAULT_REGION or ap-south-1)')
    args = parser.parse_args()

    create_deployment_package(args.function_name, args.region, recreate_all=args.recreate)


if __name__ == '__main__':
    main()
