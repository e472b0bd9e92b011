import collections
import math
import string

import dill
import tqdm

GROUP_SIZES = {'diads': 2, 'triads': 3, 'quads': 4}


def prepare_text(text: str, charset: str = string.ascii_uppercase) -> str:
    text = text.upper()
    return ''.join(c for c in text if c in charset)


def count_groups(texts, charset: str = string.ascii_uppercase, disable_tqdm=True) -> dict:
    """
    log10 frequencies of all letter groups of length 2, 3 and 4 in the texts.
    the result holds plain dicts, the user can turn them into a defaultdict with
    a default of their choice after loading
    """
    if isinstance(texts, str):
        texts = [texts]

    diads = collections.defaultdict(float)
    triads = collections.defaultdict(float)
    quads = collections.defaultdict(float)

    n_chars = 0
    for text in texts:
        text = prepare_text(text, charset)
        for i in tqdm.tqdm(range(len(text) - 3), disable=disable_tqdm):
            quad = text[i:i + 4]
            quads[quad] += 1
            triads[quad[:3]] += 1
            diads[quad[:2]] += 1
            n_chars += 1

    if n_chars == 0:
        raise ValueError('texts contain no group of 4 characters from the charset')

    for di in [diads, triads, quads]:
        for key in di.keys():
            di[key] = math.log10(di[key] / n_chars)

    return {'charset': charset,
            'diads': dict(diads),
            'triads': dict(triads),
            'quads': dict(quads)}


def count_groups_in_files(paths, charset: str = string.ascii_uppercase, disable_tqdm=True) -> dict:
    texts = []
    for path in paths:
        with open(path, 'r', encoding='utf-8') as file_:
            texts.append(file_.read())
    return count_groups(texts, charset=charset, disable_tqdm=disable_tqdm)


def save_language_stats(stats: dict, path):
    with open(path, 'wb') as out_file:
        dill.dump(stats, out_file)


def load_language_stats(path) -> dict:
    with open(path, 'rb') as read_file:
        return dill.load(read_file)
